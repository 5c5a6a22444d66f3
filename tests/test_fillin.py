import random
import unittest
from unittest.mock import patch

from crossfill.core.constants import Algorithm, PuzzleType
from crossfill.core.models import WordEntry
from crossfill.data.dictionary import DictionaryIndex
from crossfill.engine.generator import GeneratorConfig, generate_crossword
from crossfill.fillin.assembler import assemble_result
from crossfill.fillin.cpsat import solve_with_cpsat
from crossfill.fillin.generator import FillinConfig, generate_fillin_smart, score_fill, words_by_length
from crossfill.fillin.slots import extract_slots


SQUARE_WORDS = ["BAT", "ORE", "WED", "BOW", "ARE", "TED"]
SMALL = FillinConfig(width=3, height=3, attempts=2, restarts_per_template=2)


def make_dictionary(words, playability=None) -> DictionaryIndex:
    return DictionaryIndex([WordEntry(w, f"about {w}") for w in words], playability or {})


class AssembleResultTests(unittest.TestCase):
    def test_unfilled_white_cells_become_black(self) -> None:
        template = [[False, True, False], [True, True, True], [False, True, False]]
        slots = extract_slots(template)
        dictionary = make_dictionary(["CAT"], {"CAT": 40})

        result = assemble_result(template, slots, ["CAT", None], dictionary)
        self.assertEqual(result.grid, [[None, None, None], ["C", "A", "T"], [None, None, None]])
        self.assertEqual((result.width, result.height), (3, 3))
        self.assertEqual(len(result.words), 1)
        self.assertEqual(result.words[0].definition, "about CAT")
        self.assertEqual(result.words[0].clue_number, 1)
        self.assertEqual(result.avg_playability, 40)
        self.assertIs(result.puzzle_type, PuzzleType.FILLIN)


class FillinGeneratorTests(unittest.TestCase):
    def test_fills_small_square_and_stops_early(self) -> None:
        dictionary = make_dictionary(SQUARE_WORDS)
        events = []
        result = generate_fillin_smart(
            dictionary,
            on_progress=lambda message, percent: events.append((message, percent)),
            config=SMALL,
            rng=random.Random(3),
        )

        self.assertIs(result.puzzle_type, PuzzleType.FILLIN)
        self.assertEqual((result.width, result.height), (3, 3))
        self.assertTrue(all(cell is not None for row in result.grid for cell in row))
        self.assertEqual(sorted(w.word for w in result.words), sorted(SQUARE_WORDS))
        self.assertEqual([w.clue_number for w in result.words], [1, 1, 2, 3, 4, 5])
        for placed in result.words:
            for i, (r, c) in enumerate(placed.cells):
                self.assertEqual(result.grid[r][c], placed.word[i])

        self.assertEqual(
            events,
            [
                ("Fill-in 1/2: building grid...", 0),
                ("Fill-in 1/2: filling 6 slots...", 5),
                ("Done!", 100),
            ],
        )

    def test_partial_fill_has_no_empty_white_cells(self) -> None:
        # Two words can never fill six slots; the best partial gets patched
        dictionary = make_dictionary(["AAA", "BBB"])
        result = generate_fillin_smart(dictionary, config=SMALL, rng=random.Random(1))

        self.assertTrue(result.words)
        self.assertLess(len(result.words), 6)
        covered = {cell for w in result.words for cell in w.cells}
        for r, row in enumerate(result.grid):
            for c, cell in enumerate(row):
                self.assertNotEqual(cell, "")
                if cell is not None:
                    self.assertIn((r, c), covered)
        words = [w.word for w in result.words]
        self.assertEqual(len(words), len(set(words)))

    def test_uncovered_lengths_give_degenerate_result(self) -> None:
        dictionary = make_dictionary(["WORD", "LONG"])
        events = []
        result = generate_fillin_smart(
            dictionary,
            on_progress=lambda m, p: events.append(m),
            config=SMALL,
            rng=random.Random(0),
        )
        self.assertEqual((result.width, result.height, result.words), (0, 0, []))
        self.assertIs(result.puzzle_type, PuzzleType.FILLIN)
        self.assertEqual(events[-1], "Done!")
        self.assertNotIn("filling", " ".join(events))

    def test_score_rewards_complete_fills(self) -> None:
        dictionary = make_dictionary(SQUARE_WORDS)
        result = generate_fillin_smart(dictionary, config=SMALL, rng=random.Random(3))
        self.assertGreaterEqual(score_fill(result, 6, 6), 5000)
        self.assertLess(score_fill(result, 5, 6), 5000)

    def test_dispatcher_ignores_word_list_for_fillin(self) -> None:
        dictionary = make_dictionary(SQUARE_WORDS)
        result = generate_crossword(
            [WordEntry("UNRELATED")],
            Algorithm.FILLIN_SMART,
            dictionary=dictionary,
            config=GeneratorConfig(seed=8, fillin=SMALL),
        )
        self.assertIs(result.puzzle_type, PuzzleType.FILLIN)
        self.assertEqual(sorted(w.word for w in result.words), sorted(SQUARE_WORDS))


class CpSatTests(unittest.TestCase):
    def test_solves_word_square(self) -> None:
        slots = extract_slots([[True] * 3 for _ in range(3)])
        assignments = solve_with_cpsat(slots, {3: SQUARE_WORDS}, timeout=10.0)

        self.assertIsNotNone(assignments)
        self.assertEqual(set(assignments), set(SQUARE_WORDS))
        for i, slot in enumerate(slots):
            for crossing in slot.crossings:
                other = assignments[crossing.other_slot_idx]
                self.assertEqual(assignments[i][crossing.index_in_slot], other[crossing.index_in_other_slot])

    def test_infeasible_returns_none(self) -> None:
        slots = extract_slots([[True] * 3 for _ in range(3)])
        self.assertIsNone(solve_with_cpsat(slots, {3: ["ABC", "DEF", "GHI"]}, timeout=5.0))
        self.assertIsNone(solve_with_cpsat(slots, {}, timeout=5.0))
        self.assertEqual(solve_with_cpsat([], {}), [])

    def test_driver_uses_cpsat_backend(self) -> None:
        dictionary = make_dictionary(SQUARE_WORDS)
        config = FillinConfig(width=3, height=3, attempts=1, backend="cpsat")
        with patch("crossfill.fillin.generator.solve") as backtracking:
            result = generate_fillin_smart(dictionary, config=config, rng=random.Random(0))
        backtracking.assert_not_called()
        self.assertEqual(len(result.words), 6)

    def test_driver_falls_back_when_cpsat_fails(self) -> None:
        dictionary = make_dictionary(SQUARE_WORDS)
        config = FillinConfig(width=3, height=3, attempts=1, backend="cpsat")
        with patch("crossfill.fillin.generator.solve_with_cpsat", return_value=None):
            with self.assertLogs("crossfill.fillin.generator", level="WARNING"):
                result = generate_fillin_smart(dictionary, config=config, rng=random.Random(0))
        self.assertEqual(len(result.words), 6)

    def test_words_by_length_uses_dictionary_buckets(self) -> None:
        dictionary = make_dictionary(["CAT", "HORSE", "AB"])
        self.assertEqual(words_by_length(dictionary), {3: ("CAT",), 5: ("HORSE",)})


if __name__ == "__main__":
    unittest.main()
