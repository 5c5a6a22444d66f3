"""Data models shared by the crossword and fill-in engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .constants import Direction, PuzzleType

LetterGrid = List[List[Optional[str]]]
Template = List[List[bool]]


def cells_for(row: int, col: int, direction: Direction, length: int) -> List[Tuple[int, int]]:
    dr, dc = direction.step
    return [(row + dr * i, col + dc * i) for i in range(length)]


@dataclass(frozen=True)
class WordEntry:
    """A dictionary word with its definition."""

    word: str
    definition: str = ""


@dataclass
class GridWord:
    """A word written onto the working grid, before clue numbering."""

    word: str
    definition: str
    row: int
    col: int
    direction: Direction

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return cells_for(self.row, self.col, self.direction, len(self.word))


@dataclass
class PlacedWord:
    """A numbered entry of a finished puzzle."""

    word: str
    definition: str
    row: int
    col: int
    direction: Direction
    clue_number: int

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return cells_for(self.row, self.col, self.direction, len(self.word))


@dataclass
class Placement:
    """A candidate position for a word; produced and discarded per search."""

    row: int
    col: int
    direction: Direction
    intersections: int
    score: float = 0.0


@dataclass(frozen=True)
class BoundingBox:
    min_row: int
    max_row: int
    min_col: int
    max_col: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @classmethod
    def empty(cls) -> "BoundingBox":
        return cls(0, 0, 0, 0, 0, 0)


@dataclass
class CrosswordData:
    """Finished puzzle as handed to the store and the UI."""

    grid: LetterGrid
    words: List[PlacedWord]
    width: int
    height: int
    avg_playability: int = 0
    puzzle_type: PuzzleType = PuzzleType.CLASSIC

    @classmethod
    def empty(cls, puzzle_type: PuzzleType = PuzzleType.CLASSIC) -> "CrosswordData":
        return cls(grid=[[]], words=[], width=0, height=0, puzzle_type=puzzle_type)

    @property
    def filled_cells(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell is not None)

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "grid": [list(row) for row in self.grid],
            "words": [
                {
                    "word": placed.word,
                    "definition": placed.definition,
                    "row": placed.row,
                    "col": placed.col,
                    "direction": placed.direction.value,
                    "clueNumber": placed.clue_number,
                }
                for placed in self.words
            ],
            "width": self.width,
            "height": self.height,
            "avgPlayability": self.avg_playability,
            "puzzleType": self.puzzle_type.value,
        }


@dataclass(frozen=True)
class Crossing:
    """A cell shared with another slot, seen from one side."""

    index_in_slot: int
    other_slot_idx: int
    index_in_other_slot: int


@dataclass
class Slot:
    """A maximal white run in a fill-in template."""

    row: int
    col: int
    direction: Direction
    length: int
    crossings: List[Crossing] = field(default_factory=list)

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return cells_for(self.row, self.col, self.direction, self.length)
