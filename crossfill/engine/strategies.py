"""Classic crossword placement strategies.

Every strategy follows the same skeleton: seed the longest word across the
middle of an oversized working grid, attach the remaining words through
:func:`find_placements`, retry the words that did not fit and finally trim
the grid. They differ in working size, candidate scoring, seeding, retry
count and whether dictionary words are used to fill gaps afterwards.
"""

from __future__ import annotations

import math
import random
from collections import Counter
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

from ..core.constants import Direction
from ..core.models import BoundingBox, CrosswordData, GridWord, Placement, WordEntry
from ..data.dictionary import DictionaryIndex
from ..utils.logger import get_logger
from .assembler import finalize
from .grid import bounding_box, in_bounds, make_grid, place_word
from .placement import find_placements, is_valid_placement


LOGGER = get_logger(__name__)

ProgressCallback = Callable[[str, float], None]


@dataclass(frozen=True)
class Trial:
    """Bounding box effect of a candidate placement."""

    box: BoundingBox
    density: float
    expansion: int
    within_bounds: bool


Scorer = Callable[["PlacementBoard", str, Placement, Trial], float]


class PlacementBoard:
    """Working grid plus the words placed on it during one strategy run."""

    def __init__(self, size: int, dictionary: DictionaryIndex) -> None:
        self.size = size
        self.dictionary = dictionary
        self.grid = make_grid(size)
        self.placed: List[GridWord] = []
        self.filled = 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def seed(self, entry: WordEntry) -> None:
        row = self.size // 2
        col = (self.size - len(entry.word)) // 2
        self.commit(entry, row, col, Direction.ACROSS)

    def commit(self, entry: WordEntry, row: int, col: int, direction: Direction) -> None:
        placed = GridWord(entry.word, entry.definition, row, col, direction)
        new_letters = sum(
            1 for r, c in placed.cells if in_bounds(self.grid, r, c) and self.grid[r][c] is None
        )
        place_word(self.grid, entry.word, row, col, direction)
        self.filled += new_letters
        self.placed.append(placed)

    # ------------------------------------------------------------------
    # Scoring helpers
    # ------------------------------------------------------------------
    def trial(self, word: str, candidate: Placement, current: BoundingBox) -> Trial:
        """Measure a placement without copying the grid.

        Every filled cell lies inside ``current``, so the filled count of the
        enlarged box is the current count plus the word's new letters.
        """

        dr, dc = candidate.direction.step
        end_row = candidate.row + dr * (len(word) - 1)
        end_col = candidate.col + dc * (len(word) - 1)
        min_row = min(current.min_row, candidate.row)
        max_row = max(current.max_row, end_row)
        min_col = min(current.min_col, candidate.col)
        max_col = max(current.max_col, end_col)
        box = BoundingBox(
            min_row=min_row,
            max_row=max_row,
            min_col=min_col,
            max_col=max_col,
            width=max_col - min_col + 1,
            height=max_row - min_row + 1,
        )
        filled = self.filled + len(word) - candidate.intersections
        within = (
            candidate.row >= current.min_row
            and candidate.col >= current.min_col
            and (end_col <= current.max_col if candidate.direction is Direction.ACROSS else end_row <= current.max_row)
        )
        return Trial(
            box=box,
            density=filled / box.area,
            expansion=box.area - current.area,
            within_bounds=within,
        )

    def candidates(self, word: str) -> List[Placement]:
        return find_placements(self.grid, self.placed, word, self.dictionary)

    def rescore(self, word: str, candidates: Sequence[Placement], scorer: Optional[Scorer]) -> None:
        if scorer is None:
            return
        current = bounding_box(self.grid)
        for candidate in candidates:
            candidate.score = scorer(self, word, candidate, self.trial(word, candidate, current))

    def try_place(
        self,
        entry: WordEntry,
        scorer: Optional[Scorer] = None,
        min_intersections: int = 1,
    ) -> bool:
        """Place ``entry`` at its best-scoring candidate, if any."""

        candidates = [c for c in self.candidates(entry.word) if c.intersections >= min_intersections]
        if not candidates:
            return False
        self.rescore(entry.word, candidates, scorer)
        best = max(candidates, key=lambda c: c.score)
        if best.score == -math.inf:
            return False
        self.commit(entry, best.row, best.col, best.direction)
        return True

    def place_all(self, entries: Sequence[WordEntry], scorer: Optional[Scorer] = None) -> List[WordEntry]:
        return [entry for entry in entries if not self.try_place(entry, scorer)]

    def retry(self, unplaced: List[WordEntry], passes: int, scorer: Optional[Scorer] = None) -> List[WordEntry]:
        """Re-attempt failed words; new letters may have opened positions."""

        for _ in range(passes):
            if not unplaced:
                break
            unplaced = self.place_all(unplaced, scorer)
        return unplaced

    # ------------------------------------------------------------------
    # Gap filling
    # ------------------------------------------------------------------
    def gap_fill(self, min_playability: int = 0) -> int:
        """Fill empty runs inside the bounding box with dictionary words.

        A run qualifies when it starts after an empty cell, is at least three
        long, ends before an empty cell and already holds two or more letters.
        """

        box = bounding_box(self.grid)
        if box.area == 0:
            return 0
        used = {w.word for w in self.placed}
        added = 0

        for direction in (Direction.ACROSS, Direction.DOWN):
            outer = range(box.min_row, box.max_row + 1) if direction is Direction.ACROSS else range(box.min_col, box.max_col + 1)
            for line in outer:
                if direction is Direction.ACROSS:
                    positions = [(line, c) for c in range(box.min_col, box.max_col + 1)]
                else:
                    positions = [(r, line) for r in range(box.min_row, box.max_row + 1)]
                for index, (r, c) in enumerate(positions):
                    if self._fill_at(r, c, direction, positions[index:], used, min_playability):
                        added += 1
        if added:
            LOGGER.debug("Gap filling added %d words", added)
        return added

    def _fill_at(
        self,
        row: int,
        col: int,
        direction: Direction,
        span: Sequence[Tuple[int, int]],
        used: Set[str],
        min_playability: int,
    ) -> bool:
        dr, dc = direction.step
        if self.grid[row][col] is not None:
            return False
        if row - dr >= 0 and col - dc >= 0 and self.grid[row - dr][col - dc] is not None:
            return False

        pattern = [self.grid[r][c] for r, c in span]
        for length in range(3, min(15, len(pattern)) + 1):
            after_r, after_c = row + dr * length, col + dc * length
            if after_r < self.size and after_c < self.size and self.grid[after_r][after_c] is not None:
                continue
            if sum(1 for letter in pattern[:length] if letter is not None) < 2:
                continue
            filler = self._best_filler(pattern[:length], row, col, direction, used)
            if filler is None or self.dictionary.playability(filler.word) < min_playability:
                continue
            self.commit(filler, row, col, direction)
            used.add(filler.word)
            return True
        return False

    def _best_filler(
        self,
        pattern: Sequence[Optional[str]],
        row: int,
        col: int,
        direction: Direction,
        used: Set[str],
    ) -> Optional[WordEntry]:
        # Candidates arrive in playability order, so the first legal one is the best.
        for word in self.dictionary.find_candidates(len(pattern), pattern, banned=used):
            if is_valid_placement(self.grid, word, row, col, direction, self.dictionary):
                return self.dictionary.entry(word) or WordEntry(word)
        return None

    def result(self) -> CrosswordData:
        return finalize(self.grid, self.placed, self.dictionary)


# ----------------------------------------------------------------------
# Scorers
# ----------------------------------------------------------------------
def compact_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return c.intersections * 5 + t.density * 20 - t.expansion * 3


def dense_seed_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return c.intersections * 15 - t.expansion * 5


def dense_grow_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return c.intersections * 10 + t.density * 30 - t.expansion * 4


def dense_relaxed_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    if t.expansion > 20:
        return -math.inf
    return c.intersections * 10 - t.expansion * 5


def gap_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return c.intersections * 8 + t.density * 25 - t.expansion * 4


def fitted_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return gap_score(board, word, c, t) + (15 if t.within_bounds else 0)


def smart_score(board: PlacementBoard, word: str, c: Placement, t: Trial) -> float:
    return fitted_score(board, word, c, t) + math.log(board.dictionary.playability(word) + 1) * 3


# ----------------------------------------------------------------------
# Strategies
# ----------------------------------------------------------------------
def fitting(words: Sequence[WordEntry], size: int) -> List[WordEntry]:
    return [e for e in words if 0 < len(e.word) <= size]


def longest_first(words: Sequence[WordEntry]) -> List[WordEntry]:
    return sorted(words, key=lambda e: len(e.word), reverse=True)


def generate_original(words: Sequence[WordEntry], dictionary: DictionaryIndex) -> CrosswordData:
    words = fitting(words, 80)
    if not words:
        return CrosswordData.empty()
    ordered = longest_first(words)
    board = PlacementBoard(80, dictionary)
    board.seed(ordered[0])
    unplaced = board.retry(board.place_all(ordered[1:]), passes=3)
    LOGGER.debug("original: placed %d, dropped %d", len(board.placed), len(unplaced))
    return board.result()


def generate_compact(words: Sequence[WordEntry], dictionary: DictionaryIndex) -> CrosswordData:
    words = fitting(words, 50)
    if not words:
        return CrosswordData.empty()
    ordered = longest_first(words)
    board = PlacementBoard(50, dictionary)
    board.seed(ordered[0])
    unplaced = board.retry(board.place_all(ordered[1:], compact_score), passes=2, scorer=compact_score)
    LOGGER.debug("compact: placed %d, dropped %d", len(board.placed), len(unplaced))
    return board.result()


def shared_letter_score(a: str, b: str) -> int:
    """Number of letters of ``a`` matched one-to-one by letters of ``b``."""

    return sum((Counter(a) & Counter(b)).values())


def select_seed_words(words: Sequence[WordEntry], seed_count: int) -> List[WordEntry]:
    """Pick the words sharing the most letters with the rest of the list."""

    scored = []
    for i, entry in enumerate(words):
        total = sum(
            shared_letter_score(entry.word, other.word) for j, other in enumerate(words) if i != j
        )
        scored.append((total, entry))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [entry for _, entry in scored[:seed_count]]


def generate_dense(words: Sequence[WordEntry], dictionary: DictionaryIndex, seed_count: int = 6) -> CrosswordData:
    words = fitting(words, 40)
    if not words:
        return CrosswordData.empty()
    board = PlacementBoard(40, dictionary)
    seeds = longest_first(select_seed_words(words, seed_count))
    seed_ids = {id(entry) for entry in seeds}
    remaining = [entry for entry in words if id(entry) not in seed_ids]

    board.seed(seeds[0])
    skipped = board.place_all(seeds[1:], dense_seed_score)

    for entry in longest_first(remaining):
        if not board.try_place(entry, dense_grow_score, min_intersections=2):
            skipped.append(entry)

    dropped = board.place_all(skipped, dense_relaxed_score)
    LOGGER.debug("dense: placed %d, dropped %d", len(board.placed), len(dropped))
    return board.result()


def generate_fitted(words: Sequence[WordEntry], dictionary: DictionaryIndex) -> CrosswordData:
    words = fitting(words, 30)
    if not words:
        return CrosswordData.empty()
    ordered = longest_first(words)
    board = PlacementBoard(30, dictionary)
    board.seed(ordered[0])
    unplaced = board.retry(board.place_all(ordered[1:], fitted_score), passes=2, scorer=gap_score)
    board.gap_fill()
    LOGGER.debug("fitted: placed %d, dropped %d", len(board.placed), len(unplaced))
    return board.result()


def smart_order(words: Sequence[WordEntry], dictionary: DictionaryIndex, rng: random.Random) -> List[WordEntry]:
    """Longer and more playable words first, jittered so attempts differ."""

    shuffled = list(words)
    rng.shuffle(shuffled)
    keyed = [
        (len(e.word) * 100 + dictionary.playability(e.word) * 0.001 + rng.uniform(-25, 25), e)
        for e in shuffled
    ]
    keyed.sort(key=lambda item: item[0], reverse=True)
    return [entry for _, entry in keyed]


def attempt_score(result: CrosswordData) -> float:
    area = result.width * result.height or 1
    density = result.filled_cells / area
    return (
        len(result.words) * 1000
        + density * 500
        + math.log(result.avg_playability + 1) * 100
        - area * 2
    )


def generate_smart(
    words: Sequence[WordEntry],
    dictionary: DictionaryIndex,
    rng: Optional[random.Random] = None,
    on_progress: Optional[ProgressCallback] = None,
    attempts: int = 5,
    gap_fill_min_playability: int = 100,
) -> CrosswordData:
    """Run several randomized attempts and keep the best-scoring grid."""

    rng = rng or random.Random()
    words = fitting(words, 30)
    if not words:
        if on_progress:
            on_progress("Done!", 100)
        return CrosswordData.empty()

    best: Optional[CrosswordData] = None
    best_score = -math.inf
    for attempt in range(attempts):
        base_pct = attempt / attempts * 100
        if on_progress:
            on_progress(f"Attempt {attempt + 1}/{attempts}...", base_pct)

        ordered = smart_order(words, dictionary, rng)
        board = PlacementBoard(30, dictionary)
        board.seed(ordered[0])
        board.retry(board.place_all(ordered[1:], smart_score), passes=2, scorer=gap_score)

        if on_progress:
            on_progress(f"Attempt {attempt + 1}/{attempts}: Gap-filling...", base_pct + 10)
        board.gap_fill(min_playability=gap_fill_min_playability)

        result = board.result()
        score = attempt_score(result)
        LOGGER.debug("smart attempt %d: %d words, score %.1f", attempt + 1, len(result.words), score)
        if score > best_score:
            best_score = score
            best = result

    if on_progress:
        on_progress("Done!", 100)
    return best or CrosswordData.empty()
