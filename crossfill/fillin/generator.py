"""Fill-in puzzle driver.

Each attempt builds a fresh template, extracts its slots and fills them from
the whole dictionary. Unsolved searches fall back to the deepest partial fill
completed greedily. Results are scored and the best one is kept; the run
stops as soon as a template is filled completely.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..core.models import CrosswordData, Slot, Template
from ..core.constants import PuzzleType
from ..data.dictionary import DictionaryIndex
from ..utils.logger import get_logger
from .assembler import assemble_result
from .cpsat import solve_with_cpsat
from .patch import greedy_patch
from .slots import extract_slots
from .solver import DEFAULT_MAX_BACKTRACKS, DEFAULT_SHUFFLE_TOP, WordsByLength, solve
from .template import TARGET_BLACK_FRACTION, generate_template


LOGGER = get_logger(__name__)

ProgressCallback = Callable[[str, float], None]

FULL_FILL_BONUS = 5000


@dataclass
class FillinConfig:
    width: int = 13
    height: int = 13
    attempts: int = 8
    restarts_per_template: int = 3
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS
    shuffle_top: int = DEFAULT_SHUFFLE_TOP
    target_black_fraction: float = TARGET_BLACK_FRACTION
    backend: str = "backtracking"
    cpsat_timeout: float = 10.0


def words_by_length(dictionary: DictionaryIndex) -> Dict[int, Sequence[str]]:
    return {length: dictionary.words_of_length(length) for length in dictionary.lengths()}


def score_fill(result: CrosswordData, filled: int, slot_count: int) -> float:
    completeness = filled / slot_count if slot_count else 0.0
    distinct_lengths = len({len(w.word) for w in result.words})
    return (
        (FULL_FILL_BONUS if filled == slot_count else 0)
        + completeness * 2000
        + filled * 100
        + result.avg_playability * 0.1
        + distinct_lengths * 50
    )


class FillinGenerator:
    """Runs template and solve cycles for one fill-in request."""

    def __init__(
        self,
        dictionary: DictionaryIndex,
        config: Optional[FillinConfig] = None,
        rng: Optional[random.Random] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.dictionary = dictionary
        self.config = config or FillinConfig()
        self.rng = rng or random.Random()
        self.on_progress = on_progress
        self.words = words_by_length(dictionary)
        self.best: Optional[CrosswordData] = None
        self.best_score = float("-inf")

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self) -> CrosswordData:
        cfg = self.config
        for attempt in range(cfg.attempts):
            pct = attempt / cfg.attempts * 100
            self._progress(f"Fill-in {attempt + 1}/{cfg.attempts}: building grid...", pct)

            template = generate_template(cfg.width, cfg.height, self.rng, cfg.target_black_fraction)
            slots = extract_slots(template)
            if not slots:
                LOGGER.debug("Attempt %d: template has no slots", attempt + 1)
                continue
            lengths = sorted({s.length for s in slots})
            if not self.dictionary.has_lengths(lengths):
                LOGGER.debug("Attempt %d: lengths %s not all covered", attempt + 1, lengths)
                continue

            self._progress(
                f"Fill-in {attempt + 1}/{cfg.attempts}: filling {len(slots)} slots...", pct + 5
            )
            if self._fill_template(template, slots):
                LOGGER.info("Fill-in attempt %d filled every slot", attempt + 1)
                break

        self._progress("Done!", 100)
        return self.best or CrosswordData.empty(PuzzleType.FILLIN)

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def _fill_template(self, template: Template, slots: List[Slot]) -> bool:
        if self.config.backend == "cpsat":
            assignments = solve_with_cpsat(slots, self.words, timeout=self.config.cpsat_timeout)
            if assignments is not None:
                return self._consider(template, slots, assignments)
            LOGGER.warning("CP-SAT found no fill, falling back to backtracking")

        for _ in range(self.config.restarts_per_template):
            outcome = solve(
                slots,
                self.words,
                self.rng,
                max_backtracks=self.config.max_backtracks,
                shuffle_top=self.config.shuffle_top,
            )
            if outcome.solved:
                assignments = outcome.assignments
            elif outcome.best.filled_count > 0:
                assignments = greedy_patch(slots, outcome.best.assignments, self.words)
            else:
                continue
            if self._consider(template, slots, assignments):
                return True
        return False

    def _consider(self, template: Template, slots: List[Slot], assignments: List[Optional[str]]) -> bool:
        """Score a fill against the best so far; True if it fills every slot."""

        filled = sum(1 for word in assignments if word is not None)
        result = assemble_result(template, slots, assignments, self.dictionary)
        score = score_fill(result, filled, len(slots))
        LOGGER.debug("Fill: %d/%d slots, score %.1f", filled, len(slots), score)
        if score > self.best_score:
            self.best_score = score
            self.best = result
        return filled == len(slots)

    def _progress(self, message: str, percent: float) -> None:
        if self.on_progress:
            self.on_progress(message, percent)


def generate_fillin_smart(
    dictionary: DictionaryIndex,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[FillinConfig] = None,
    rng: Optional[random.Random] = None,
) -> CrosswordData:
    """Generate a fill-in puzzle from the whole dictionary."""

    return FillinGenerator(dictionary, config=config, rng=rng, on_progress=on_progress).generate()
