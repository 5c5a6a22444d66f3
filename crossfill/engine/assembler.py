"""Turn a working grid into a finished, numbered puzzle."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

from ..core.constants import Direction, PuzzleType
from ..core.models import CrosswordData, GridWord, LetterGrid, PlacedWord
from ..data.dictionary import DictionaryIndex
from .grid import trim


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def assign_clue_numbers(words: Sequence[GridWord], width: int, height: int) -> List[PlacedWord]:
    """Number word starts in reading order.

    A cell starting both an across and a down word gets a single number;
    numbers are contiguous from 1.
    """

    starts: Dict[Tuple[int, int], Dict[Direction, GridWord]] = {}
    for word in words:
        starts.setdefault((word.row, word.col), {})[word.direction] = word

    numbered: List[PlacedWord] = []
    clue_number = 1
    for r in range(height):
        for c in range(width):
            entry = starts.get((r, c))
            if not entry:
                continue
            for direction in (Direction.ACROSS, Direction.DOWN):
                word = entry.get(direction)
                if word is None:
                    continue
                numbered.append(
                    PlacedWord(
                        word=word.word,
                        definition=word.definition,
                        row=word.row,
                        col=word.col,
                        direction=direction,
                        clue_number=clue_number,
                    )
                )
            clue_number += 1
    return numbered


def average_playability(words: Sequence[PlacedWord], dictionary: DictionaryIndex) -> int:
    if not words:
        return 0
    total = sum(dictionary.playability(w.word) for w in words)
    return round_half_up(total / len(words))


def finalize(grid: LetterGrid, placed: Sequence[GridWord], dictionary: DictionaryIndex) -> CrosswordData:
    trimmed, offset_row, offset_col = trim(grid)
    height = len(trimmed) if trimmed[0] else 0
    width = len(trimmed[0])

    shifted = [replace(w, row=w.row - offset_row, col=w.col - offset_col) for w in placed]
    words = assign_clue_numbers(shifted, width, height)

    return CrosswordData(
        grid=trimmed,
        words=words,
        width=width,
        height=height,
        avg_playability=average_playability(words, dictionary),
        puzzle_type=PuzzleType.CLASSIC,
    )
