"""Entry point dispatching a generation request to one strategy.

The classic strategies lay out a caller-supplied word list; ``fillin-smart``
ignores the list and fills a template from the whole dictionary.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Union

from ..core.constants import Algorithm
from ..core.models import CrosswordData, WordEntry
from ..data.dictionary import DictionaryIndex, normalize_entries
from ..fillin.generator import FillinConfig, generate_fillin_smart
from ..utils.logger import get_logger
from .strategies import (
    ProgressCallback,
    generate_compact,
    generate_dense,
    generate_fitted,
    generate_original,
    generate_smart,
)


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    seed: Optional[int] = None
    smart_attempts: int = 5
    gap_fill_min_playability: int = 100
    dense_seed_count: int = 6
    fillin: FillinConfig = field(default_factory=FillinConfig)

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


Strategy = Callable[
    [Sequence[WordEntry], DictionaryIndex, GeneratorConfig, random.Random, Optional[ProgressCallback]],
    CrosswordData,
]


def _run_original(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_original(words, dictionary)


def _run_compact(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_compact(words, dictionary)


def _run_dense(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_dense(words, dictionary, seed_count=config.dense_seed_count)


def _run_fitted(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_fitted(words, dictionary)


def _run_smart(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_smart(
        words,
        dictionary,
        rng=rng,
        on_progress=on_progress,
        attempts=config.smart_attempts,
        gap_fill_min_playability=config.gap_fill_min_playability,
    )


def _run_fillin(words, dictionary, config, rng, on_progress) -> CrosswordData:
    return generate_fillin_smart(dictionary, on_progress=on_progress, config=config.fillin, rng=rng)


STRATEGIES: Dict[Algorithm, Strategy] = {
    Algorithm.ORIGINAL: _run_original,
    Algorithm.COMPACT: _run_compact,
    Algorithm.DENSE: _run_dense,
    Algorithm.FITTED: _run_fitted,
    Algorithm.SMART: _run_smart,
    Algorithm.FILLIN_SMART: _run_fillin,
}


def resolve_algorithm(algorithm: Union[Algorithm, str, None]) -> Algorithm:
    """Map a name to an :class:`Algorithm`; unknown names fall back to smart."""

    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm(str(algorithm).strip().lower())
    except ValueError:
        LOGGER.warning("Unknown algorithm %r, using smart", algorithm)
        return Algorithm.SMART


def generate_crossword(
    words: Sequence[WordEntry],
    algorithm: Union[Algorithm, str] = Algorithm.SMART,
    dictionary: Optional[DictionaryIndex] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[GeneratorConfig] = None,
    rng: Optional[random.Random] = None,
) -> CrosswordData:
    """Generate one puzzle with the selected strategy.

    Input words are cleaned and deduplicated first. The dictionary is used
    for playability, incidental word checks and gap filling; without one the
    input words themselves form the dictionary.
    """

    config = config or GeneratorConfig()
    rng = rng or config.make_rng()
    chosen = resolve_algorithm(algorithm)
    entries = normalize_entries(words)
    if dictionary is None:
        dictionary = DictionaryIndex(entries)

    LOGGER.info("Generating with %s from %d words", chosen.value, len(entries))
    result = STRATEGIES[chosen](entries, dictionary, config, rng, on_progress)
    LOGGER.info(
        "%s: %d words on %dx%d, avg playability %d",
        chosen.value,
        len(result.words),
        result.width,
        result.height,
        result.avg_playability,
    )
    return result
