"""Black-square templates for fill-in puzzles.

A template is a ``height x width`` matrix of booleans where ``True`` marks a
white (fillable) cell. Templates start fully white; long runs are split with
symmetric black pairs and a few extra blacks are scattered for variety.
Every black pair is checked immediately and reverted when it leaves a run of
one or two cells or splits the white region.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.constants import MAX_SLOT_LENGTH, MIN_SLOT_LENGTH, ORTHOGONAL_STEPS, Direction
from ..core.models import Template
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

BREAK_PASSES = 20
TARGET_BLACK_FRACTION = 0.18


@dataclass(frozen=True)
class Run:
    """A maximal stretch of white cells along one row or column."""

    line: int
    start: int
    length: int


def make_white_template(width: int, height: int) -> Template:
    return [[True] * width for _ in range(height)]


def template_size(template: Template) -> Tuple[int, int]:
    """Return ``(height, width)``."""

    return len(template), (len(template[0]) if template else 0)


def find_runs(template: Template, direction: Direction) -> List[Run]:
    """All white runs (any length) along rows for ACROSS, columns for DOWN."""

    height, width = template_size(template)
    primary, secondary = (height, width) if direction is Direction.ACROSS else (width, height)
    runs: List[Run] = []
    for line in range(primary):
        start = -1
        for j in range(secondary + 1):
            white = j < secondary and (
                template[line][j] if direction is Direction.ACROSS else template[j][line]
            )
            if white:
                if start == -1:
                    start = j
            elif start != -1:
                runs.append(Run(line=line, start=start, length=j - start))
                start = -1
    return runs


def has_invalid_slots(template: Template) -> bool:
    """True if any row or column holds a white run of length 1 or 2."""

    for direction in (Direction.ACROSS, Direction.DOWN):
        for run in find_runs(template, direction):
            if run.length < MIN_SLOT_LENGTH:
                return True
    return False


def is_connected(template: Template) -> bool:
    """Flood fill from the first white cell must reach every white cell."""

    height, width = template_size(template)
    whites = [(r, c) for r in range(height) for c in range(width) if template[r][c]]
    if not whites:
        return True

    seen = {whites[0]}
    queue = deque([whites[0]])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < height and 0 <= nc < width and template[nr][nc] and (nr, nc) not in seen:
                seen.add((nr, nc))
                queue.append((nr, nc))
    return len(seen) == len(whites)


def symmetric_partner(template: Template, row: int, col: int) -> Tuple[int, int]:
    height, width = template_size(template)
    return height - 1 - row, width - 1 - col


def place_black_pair(template: Template, row: int, col: int) -> bool:
    """Blacken ``(row, col)`` and its 180 degree partner if the result stays valid.

    Returns ``False`` (leaving the template untouched) when either cell is
    already black or the pair would create a short run or a split region.
    """

    sr, sc = symmetric_partner(template, row, col)
    same = (sr, sc) == (row, col)
    if not template[row][col]:
        return False
    if not same and not template[sr][sc]:
        return False

    template[row][col] = False
    template[sr][sc] = False
    if has_invalid_slots(template) or not is_connected(template):
        template[row][col] = True
        template[sr][sc] = True
        return False
    return True


def is_symmetric(template: Template) -> bool:
    height, width = template_size(template)
    return all(
        template[r][c] == template[height - 1 - r][width - 1 - c]
        for r in range(height)
        for c in range(width)
    )


def black_count(template: Template) -> int:
    return sum(1 for row in template for cell in row if not cell)


def black_fraction(template: Template) -> float:
    height, width = template_size(template)
    total = height * width
    return black_count(template) / total if total else 0.0


def _break_long_runs(template: Template, direction: Direction, rng: random.Random) -> bool:
    broke = False
    for run in find_runs(template, direction):
        if run.length <= MAX_SLOT_LENGTH:
            continue
        first = run.start + MIN_SLOT_LENGTH
        last = run.start + run.length - MIN_SLOT_LENGTH - 1
        if first > last:
            continue
        positions = list(range(first, last + 1))
        rng.shuffle(positions)
        for pos in positions:
            row, col = (run.line, pos) if direction is Direction.ACROSS else (pos, run.line)
            if place_black_pair(template, row, col):
                broke = True
                break
    return broke


def _scatter_blacks(template: Template, rng: random.Random, target_fraction: float) -> int:
    height, width = template_size(template)
    budget = int(height * width * target_fraction) - black_count(template)
    if budget <= 0:
        return 0

    interior = [
        (r, c)
        for r in range(1, height - 1)
        for c in range(1, width - 1)
        if template[r][c]
    ]
    rng.shuffle(interior)

    added = 0
    for row, col in interior:
        if added >= budget:
            break
        if not template[row][col]:
            continue
        if place_black_pair(template, row, col):
            added += 1 if symmetric_partner(template, row, col) == (row, col) else 2
    return added


def generate_template(
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
    target_black_fraction: float = TARGET_BLACK_FRACTION,
) -> Template:
    """Build a symmetric, connected template with no runs shorter than three.

    Runs longer than ``MAX_SLOT_LENGTH`` are split where a valid break point
    exists; some may survive when none does.
    """

    rng = rng or random.Random()
    template = make_white_template(width, height)

    for pass_index in range(BREAK_PASSES):
        across = _break_long_runs(template, Direction.ACROSS, rng)
        down = _break_long_runs(template, Direction.DOWN, rng)
        if not (across or down):
            break

    scattered = _scatter_blacks(template, rng, target_black_fraction)
    LOGGER.debug(
        "Template %dx%d: %d blacks (%.0f%%) after %d passes, %d scattered",
        width,
        height,
        black_count(template),
        black_fraction(template) * 100,
        pass_index + 1,
        scattered,
    )
    return template
