"""Turn a template and its slot assignments into a fill-in puzzle."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.constants import PuzzleType
from ..core.models import CrosswordData, GridWord, LetterGrid, Slot, Template
from ..data.dictionary import DictionaryIndex
from ..engine.assembler import assign_clue_numbers, average_playability
from .template import template_size


def assemble_result(
    template: Template,
    slots: Sequence[Slot],
    assignments: Sequence[Optional[str]],
    dictionary: DictionaryIndex,
) -> CrosswordData:
    """Write assigned words into a full-size grid and number the clues.

    Cells not covered by an assigned slot stay ``None``, so white squares
    the fill could not reach read as black in the result.
    """

    height, width = template_size(template)
    grid: LetterGrid = [[None] * width for _ in range(height)]
    placed: List[GridWord] = []

    for slot, word in zip(slots, assignments):
        if not word:
            continue
        for (r, c), letter in zip(slot.cells, word):
            grid[r][c] = letter
        placed.append(GridWord(word, dictionary.definition(word), slot.row, slot.col, slot.direction))

    words = assign_clue_numbers(placed, width, height)
    return CrosswordData(
        grid=grid,
        words=words,
        width=width,
        height=height,
        avg_playability=average_playability(words, dictionary),
        puzzle_type=PuzzleType.FILLIN,
    )
