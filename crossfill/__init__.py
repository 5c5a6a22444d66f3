"""Classic crossword and fill-in puzzle generator.

This package exposes the public API surface via:

- ``crossfill.engine.generator.generate_crossword``: dispatches to one of the
  classic layout strategies or the fill-in generator.
- ``crossfill.data.dictionary.DictionaryIndex``: word membership, playability
  and per-length candidate buckets shared by both engines.
- ``crossfill.io.worker.GenerationWorker``: runs requests off the caller's
  thread with id-tagged progress and result messages.
"""

from .core.constants import Algorithm, Direction, PuzzleType
from .core.models import CrosswordData, PlacedWord, WordEntry
from .data.dictionary import DictionaryConfig, DictionaryIndex, build_dictionary, load_dictionary
from .engine.generator import GeneratorConfig, generate_crossword
from .fillin.generator import FillinConfig, generate_fillin_smart
from .io.worker import GenerationWorker, WorkerMessage

__all__ = [
    "Algorithm",
    "CrosswordData",
    "DictionaryConfig",
    "DictionaryIndex",
    "Direction",
    "FillinConfig",
    "GenerationWorker",
    "GeneratorConfig",
    "PlacedWord",
    "PuzzleType",
    "WordEntry",
    "WorkerMessage",
    "build_dictionary",
    "generate_crossword",
    "generate_fillin_smart",
    "load_dictionary",
]

__version__ = "0.1.0"
