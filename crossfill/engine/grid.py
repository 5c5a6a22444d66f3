"""Letter grid primitives shared by the placement strategies."""

from __future__ import annotations

from typing import Tuple

from ..core.constants import Direction
from ..core.exceptions import PlacementError
from ..core.models import BoundingBox, LetterGrid


def make_grid(size: int) -> LetterGrid:
    return [[None] * size for _ in range(size)]


def clone_grid(grid: LetterGrid) -> LetterGrid:
    return [list(row) for row in grid]


def grid_size(grid: LetterGrid) -> Tuple[int, int]:
    """Return ``(rows, cols)``."""

    return len(grid), (len(grid[0]) if grid else 0)


def in_bounds(grid: LetterGrid, row: int, col: int) -> bool:
    rows, cols = grid_size(grid)
    return 0 <= row < rows and 0 <= col < cols


def place_word(grid: LetterGrid, word: str, row: int, col: int, direction: Direction) -> None:
    """Write ``word`` onto the grid.

    Callers validate placements first; the only check here is the bounds
    invariant, which fails loudly.
    """

    dr, dc = direction.step
    end_row = row + dr * (len(word) - 1)
    end_col = col + dc * (len(word) - 1)
    if not (in_bounds(grid, row, col) and in_bounds(grid, end_row, end_col)):
        raise PlacementError(
            f"'{word}' at ({row},{col}) {direction.value} leaves the {len(grid)}x{len(grid[0])} grid"
        )
    for i, letter in enumerate(word):
        grid[row + dr * i][col + dc * i] = letter


def is_empty(grid: LetterGrid) -> bool:
    return all(cell is None for row in grid for cell in row)


def count_filled(grid: LetterGrid) -> int:
    return sum(1 for row in grid for cell in row if cell is not None)


def bounding_box(grid: LetterGrid) -> BoundingBox:
    rows, cols = grid_size(grid)
    min_row, max_row, min_col, max_col = rows, -1, cols, -1
    for r in range(rows):
        for c in range(cols):
            if grid[r][c] is not None:
                min_row = min(min_row, r)
                max_row = max(max_row, r)
                min_col = min(min_col, c)
                max_col = max(max_col, c)

    if max_row < 0:
        return BoundingBox.empty()

    return BoundingBox(
        min_row=min_row,
        max_row=max_row,
        min_col=min_col,
        max_col=max_col,
        width=max_col - min_col + 1,
        height=max_row - min_row + 1,
    )


def density(grid: LetterGrid, box: BoundingBox) -> float:
    """Fraction of filled cells inside ``box``; 0 for a zero-area box."""

    if box.area == 0:
        return 0.0
    filled = 0
    for r in range(box.min_row, box.max_row + 1):
        for c in range(box.min_col, box.max_col + 1):
            if grid[r][c] is not None:
                filled += 1
    return filled / box.area


def trim(grid: LetterGrid) -> Tuple[LetterGrid, int, int]:
    """Crop to the bounding box; returns the grid and its row/col offset."""

    box = bounding_box(grid)
    if box.area == 0:
        return [[]], 0, 0
    trimmed = [
        grid[r][box.min_col : box.max_col + 1] for r in range(box.min_row, box.max_row + 1)
    ]
    return trimmed, box.min_row, box.min_col
