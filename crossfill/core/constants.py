"""Shared constants and enumerations for the puzzle engines."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    """Word directions supported by the grid."""

    ACROSS = "across"
    DOWN = "down"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.ACROSS else (1, 0)

    @property
    def perpendicular(self) -> "Direction":
        return Direction.DOWN if self is Direction.ACROSS else Direction.ACROSS


class Algorithm(str, Enum):
    """Generation strategies selectable through the dispatcher."""

    ORIGINAL = "original"
    COMPACT = "compact"
    DENSE = "dense"
    FITTED = "fitted"
    SMART = "smart"
    FILLIN_SMART = "fillin-smart"


class PuzzleType(str, Enum):
    CLASSIC = "classic"
    FILLIN = "fillin"


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

# Fill-in slot limits. Runs longer than MAX_SLOT_LENGTH are broken when possible.
MIN_SLOT_LENGTH = 3
MAX_SLOT_LENGTH = 8
MAX_WORD_LENGTH = 15
MAX_WORDS_PER_LENGTH = 2000

