import random
import unittest

from crossfill.core.constants import Direction
from crossfill.fillin.template import (
    Run,
    black_count,
    find_runs,
    generate_template,
    has_invalid_slots,
    is_connected,
    is_symmetric,
    make_white_template,
    place_black_pair,
)


def parse(rows):
    return [[ch == "W" for ch in row] for row in rows]


class TemplateHelperTests(unittest.TestCase):
    def test_find_runs(self) -> None:
        template = parse(["WWWBWWW", "WWWWWWW"])
        self.assertEqual(
            find_runs(template, Direction.ACROSS),
            [Run(0, 0, 3), Run(0, 4, 3), Run(1, 0, 7)],
        )
        self.assertEqual(find_runs(template, Direction.DOWN)[3], Run(3, 1, 1))

    def test_short_runs_are_invalid(self) -> None:
        self.assertFalse(has_invalid_slots(parse(["WWW", "WWW", "WWW"])))
        self.assertTrue(has_invalid_slots(parse(["WWB", "WWW", "WWW"])))

    def test_connectivity(self) -> None:
        self.assertTrue(is_connected(parse(["WWW", "WBW", "WWW"])))
        self.assertFalse(is_connected(parse(["WWWBWWW"] * 7)))
        self.assertTrue(is_connected(parse(["BBB"])))

    def test_place_black_pair_accepts_and_mirrors(self) -> None:
        template = make_white_template(5, 5)
        self.assertTrue(place_black_pair(template, 0, 0))
        self.assertFalse(template[0][0])
        self.assertFalse(template[4][4])
        self.assertEqual(black_count(template), 2)
        self.assertTrue(is_symmetric(template))

    def test_place_black_pair_reverts_short_runs(self) -> None:
        template = make_white_template(5, 5)
        self.assertFalse(place_black_pair(template, 0, 2))
        self.assertEqual(black_count(template), 0)

    def test_centre_cell_is_its_own_partner(self) -> None:
        template = make_white_template(7, 7)
        self.assertTrue(place_black_pair(template, 3, 3))
        self.assertEqual(black_count(template), 1)
        self.assertFalse(place_black_pair(template, 3, 3))

    def test_place_black_pair_reverts_disconnection(self) -> None:
        # Two blocks joined only through the centre cell
        template = parse([
            "WWWWBBB",
            "WWWWBBB",
            "WWWWBBB",
            "WWWWWWW",
            "BBBWWWW",
            "BBBWWWW",
            "BBBWWWW",
        ])
        cut = [list(row) for row in template]
        cut[3][3] = False
        self.assertFalse(has_invalid_slots(cut))
        self.assertFalse(is_connected(cut))

        before = [list(row) for row in template]
        self.assertFalse(place_black_pair(template, 3, 3))
        self.assertEqual(template, before)


class GenerateTemplateTests(unittest.TestCase):
    def test_invariants_hold_for_many_seeds(self) -> None:
        for seed in range(8):
            with self.subTest(seed=seed):
                template = generate_template(13, 13, random.Random(seed))
                self.assertEqual(len(template), 13)
                self.assertTrue(all(len(row) == 13 for row in template))
                self.assertTrue(is_symmetric(template))
                self.assertFalse(has_invalid_slots(template))
                self.assertTrue(is_connected(template))
                self.assertGreater(black_count(template), 0)

    def test_same_seed_same_template(self) -> None:
        self.assertEqual(
            generate_template(13, 13, random.Random(42)),
            generate_template(13, 13, random.Random(42)),
        )

    def test_small_grid_stays_white(self) -> None:
        self.assertEqual(generate_template(3, 3, random.Random(0)), make_white_template(3, 3))


if __name__ == "__main__":
    unittest.main()
