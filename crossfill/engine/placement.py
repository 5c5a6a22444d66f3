"""Intersection search and placement validation for classic crosswords."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ..core.constants import Direction
from ..core.models import GridWord, LetterGrid, Placement
from ..data.dictionary import DictionaryIndex
from .grid import grid_size, in_bounds, is_empty


def count_intersections(grid: LetterGrid, word: str, row: int, col: int, direction: Direction) -> int:
    dr, dc = direction.step
    return sum(1 for i, letter in enumerate(word) if grid[row + dr * i][col + dc * i] == letter)


def perpendicular_word(
    grid: LetterGrid,
    row: int,
    col: int,
    letter: str,
    direction: Direction,
) -> Optional[str]:
    """Return the run crossing (row, col) once ``letter`` is written there.

    ``direction`` is the direction of the word being placed; the run is read
    along the other axis. ``None`` when the letter would stand alone.
    """

    dr, dc = direction.perpendicular.step

    start_row, start_col = row, col
    while in_bounds(grid, start_row - dr, start_col - dc) and grid[start_row - dr][start_col - dc] is not None:
        start_row -= dr
        start_col -= dc

    letters: List[str] = []
    r, c = start_row, start_col
    while in_bounds(grid, r, c):
        cell = letter if (r, c) == (row, col) else grid[r][c]
        if cell is None:
            break
        letters.append(cell)
        r += dr
        c += dc

    if len(letters) <= 1:
        return None
    return "".join(letters)


def is_valid_placement(
    grid: LetterGrid,
    word: str,
    row: int,
    col: int,
    direction: Direction,
    dictionary: DictionaryIndex,
) -> bool:
    """Check bounds, word ends, letter agreement and incidental words.

    Every perpendicular run of two or more letters that the placement would
    create must itself be a dictionary word. At least one existing letter
    must be shared unless the grid is still empty.
    """

    dr, dc = direction.step
    length = len(word)
    end_row = row + dr * (length - 1)
    end_col = col + dc * (length - 1)
    if not (in_bounds(grid, row, col) and in_bounds(grid, end_row, end_col)):
        return False

    # Cells just before and just after the word must stay empty.
    before = (row - dr, col - dc)
    after = (end_row + dr, end_col + dc)
    for r, c in (before, after):
        if in_bounds(grid, r, c) and grid[r][c] is not None:
            return False

    has_intersection = False
    for i, letter in enumerate(word):
        r, c = row + dr * i, col + dc * i
        existing = grid[r][c]
        if existing is not None:
            if existing != letter:
                return False
            has_intersection = True
        else:
            crossing = perpendicular_word(grid, r, c, letter, direction)
            if crossing is not None and not dictionary.is_valid_word(crossing):
                return False

    return has_intersection or is_empty(grid)


def find_placements(
    grid: LetterGrid,
    placed: Sequence[GridWord],
    word: str,
    dictionary: DictionaryIndex,
) -> List[Placement]:
    """Enumerate every legal placement of ``word`` crossing a placed word.

    Candidates are returned in discovery order, scored by
    ``intersections*10 - distance_from_center + log(playability+1)*2``.
    """

    rows, cols = grid_size(grid)
    center_row, center_col = rows / 2, cols / 2
    playability_bonus = math.log(dictionary.playability(word) + 1) * 2
    candidates: List[Placement] = []

    for existing in placed:
        direction = existing.direction.perpendicular
        for ei, existing_letter in enumerate(existing.word):
            for wi, letter in enumerate(word):
                if existing_letter != letter:
                    continue

                if existing.direction is Direction.ACROSS:
                    row, col = existing.row - wi, existing.col + ei
                else:
                    row, col = existing.row + ei, existing.col - wi

                if not is_valid_placement(grid, word, row, col, direction, dictionary):
                    continue

                intersections = count_intersections(grid, word, row, col, direction)
                mid_row = row + (len(word) / 2 if direction is Direction.DOWN else 0)
                mid_col = col + (len(word) / 2 if direction is Direction.ACROSS else 0)
                distance = abs(mid_row - center_row) + abs(mid_col - center_col)
                candidates.append(
                    Placement(
                        row=row,
                        col=col,
                        direction=direction,
                        intersections=intersections,
                        score=intersections * 10 - distance + playability_bonus,
                    )
                )

    return candidates
