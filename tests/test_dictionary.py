import json
import random
import tempfile
import unittest
from pathlib import Path

from crossfill.core.exceptions import DictionaryLoadError
from crossfill.core.models import WordEntry
from crossfill.data.dictionary import (
    DictionaryConfig,
    DictionaryIndex,
    build_dictionary,
    load_dictionary,
    normalize_entries,
)
from crossfill.data.normalization import clean_word
from crossfill.data.wordlist import load_playability, load_wordlist, parse_playability
from crossfill.engine.generator import generate_crossword


def make_index(words, playability=None, **kwargs) -> DictionaryIndex:
    return DictionaryIndex([WordEntry(w, f"def {w}") for w in words], playability or {}, **kwargs)


class NormalizationTests(unittest.TestCase):
    def test_clean_word_removes_diacritics(self) -> None:
        self.assertEqual(clean_word("ăâîșț"), "AAIST")

    def test_clean_word_strips_non_letters(self) -> None:
        self.assertEqual(clean_word(" ice-cream 2 "), "ICECREAM")
        self.assertEqual(clean_word(""), "")

    def test_normalize_entries_dedupes_after_cleaning(self) -> None:
        entries = normalize_entries(
            [WordEntry("cat", "pet"), WordEntry("CAT", "again"), WordEntry("  "), WordEntry("dog")]
        )
        self.assertEqual([e.word for e in entries], ["CAT", "DOG"])
        self.assertEqual(entries[0].definition, "pet")


class WordListTests(unittest.TestCase):
    def test_tsv_header_comments_and_themes(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sample = Path(tmpdir) / "words.tsv"
            sample.write_text(
                "word\tdefinition\tthemes\n"
                "cat\tA pet\tanimals\n"
                "# skipped\n"
                "\n"
                "dog\tAnother pet\tanimals,home\n"
                "car\tVehicle\t\n"
                "Cat\tDuplicate\t\n",
                encoding="utf-8",
            )
            wordlist = load_wordlist(sample)

        self.assertEqual([e.word for e in wordlist.entries], ["CAT", "DOG", "CAR"])
        self.assertEqual(wordlist.entries[0].definition, "A pet")
        self.assertEqual(wordlist.themes(), ["animals", "home"])
        picked = wordlist.words_by_theme("animals", 10, random.Random(1))
        self.assertEqual(sorted(e.word for e in picked), ["CAT", "DOG"])
        self.assertEqual(wordlist.words_by_theme("unknown", 10), [])

    def test_json_layout(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sample = Path(tmpdir) / "words.json"
            sample.write_text(
                json.dumps(
                    {
                        "themes": ["space", "sea"],
                        "words": [
                            {"w": "star", "d": "Shines", "t": [0]},
                            {"w": "wave", "d": "Rolls in", "t": [1]},
                            {"w": "moon"},
                        ],
                    }
                ),
                encoding="utf-8",
            )
            wordlist = load_wordlist(sample)

        self.assertEqual([e.word for e in wordlist.entries], ["STAR", "WAVE", "MOON"])
        self.assertEqual([e.word for e in wordlist.words_by_theme("sea", 5)], ["WAVE"])

    def test_random_words_respects_count_and_lengths(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sample = Path(tmpdir) / "words.tsv"
            sample.write_text("ab\tx\ncat\tx\ndog\tx\nowl\tx\n", encoding="utf-8")
            wordlist = load_wordlist(sample)

        picked = wordlist.random_words(random.Random(3), min_count=2, max_count=2)
        self.assertEqual(len(picked), 2)
        self.assertTrue(all(len(e.word) >= 3 for e in picked))

    def test_missing_and_malformed_files_raise(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(DictionaryLoadError):
                load_wordlist(Path(tmpdir) / "nope.tsv")
            broken = Path(tmpdir) / "broken.json"
            broken.write_text("{not json", encoding="utf-8")
            with self.assertRaises(DictionaryLoadError):
                load_wordlist(broken)
            with self.assertRaises(DictionaryLoadError):
                load_playability(Path(tmpdir) / "nope.txt")

    def test_parse_playability_skips_bad_lines(self) -> None:
        scores = parse_playability(["50 cat", "garbage", "x DOG", "30 dog", ""])
        self.assertEqual(scores, {"CAT": 50, "DOG": 30})

    def test_parse_playability_skips_negative_scores(self) -> None:
        self.assertEqual(parse_playability(["-5 car", "10 cater"]), {"CATER": 10})


class DictionaryIndexTests(unittest.TestCase):
    def setUp(self) -> None:
        self.index = make_index(["CAT", "COT", "CUT", "DOG", "AB"], {"COT": 90, "CAT": 50})

    def test_membership_includes_every_length(self) -> None:
        self.assertIn("AB", self.index)
        self.assertTrue(self.index.is_valid_word("DOG"))
        self.assertFalse(self.index.is_valid_word("DIG"))
        self.assertEqual(len(self.index), 5)
        self.assertEqual(self.index.lengths(), [3])

    def test_bucket_order_is_playability_then_source(self) -> None:
        self.assertEqual(self.index.words_of_length(3), ("COT", "CAT", "CUT", "DOG"))
        self.assertEqual(self.index.words_of_length(7), ())

    def test_find_candidates_by_pattern(self) -> None:
        pattern = ["C", None, "T"]
        self.assertEqual(self.index.find_candidates(3, pattern), ["COT", "CAT", "CUT"])
        self.assertEqual(self.index.find_candidates(3, pattern, banned={"COT"}), ["CAT", "CUT"])
        self.assertEqual(self.index.find_candidates(3, pattern, limit=1), ["COT"])
        self.assertEqual(self.index.find_candidates(3, ["Z", None, None]), [])
        self.assertEqual(self.index.find_candidates(4), [])

    def test_bucket_cap_keeps_most_playable(self) -> None:
        capped = make_index(["CAT", "COT", "CUT"], {"COT": 90, "CAT": 50}, max_per_length=2)
        self.assertEqual(capped.words_of_length(3), ("COT", "CAT"))
        self.assertEqual(capped.find_candidates(3, [None, None, "T"]), ["COT", "CAT"])
        self.assertTrue(capped.is_valid_word("CUT"))

    def test_lookups_are_idempotent(self) -> None:
        for _ in range(3):
            self.assertEqual(self.index.playability("COT"), 90)
            self.assertEqual(self.index.playability("NOPE"), 0)
            self.assertTrue(self.index.is_valid_word("CAT"))
            self.assertFalse(self.index.is_valid_word("NOPE"))

    def test_negative_scores_are_clamped(self) -> None:
        index = make_index(["CATER", "CAR"], {"CAR": -5, "CATER": 10})
        self.assertEqual(index.playability("CAR"), 0)
        self.assertEqual(index.words_of_length(5), ("CATER",))

        result = generate_crossword([WordEntry("CATER"), WordEntry("CAR")], "original", dictionary=index)
        self.assertEqual(sorted(w.word for w in result.words), ["CAR", "CATER"])

    def test_definitions(self) -> None:
        self.assertEqual(self.index.definition("DOG"), "def DOG")
        self.assertEqual(self.index.definition("NOPE"), "")
        self.assertIsNone(self.index.entry("NOPE"))

    def test_build_and_cached_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            words = Path(tmpdir) / "words.tsv"
            words.write_text("cat\tPet\ncot\tBed\n", encoding="utf-8")
            scores = Path(tmpdir) / "scores.txt"
            scores.write_text("10 CAT\n20 COT\n", encoding="utf-8")

            built = build_dictionary(DictionaryConfig(wordlist_path=words, playability_path=scores))
            self.assertEqual(built.words_of_length(3), ("COT", "CAT"))

            first = load_dictionary(str(words), str(scores))
            second = load_dictionary(str(words), str(scores))
            self.assertIs(first, second)
            self.assertEqual(first.playability("CAT"), 10)


if __name__ == "__main__":
    unittest.main()
