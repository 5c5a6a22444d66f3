"""Slot and crossing extraction from a fill-in template."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Tuple

from ..core.constants import MIN_SLOT_LENGTH, Direction
from ..core.models import Crossing, Slot, Template
from .template import find_runs


def extract_slots(template: Template, min_length: int = MIN_SLOT_LENGTH) -> List[Slot]:
    """Return across slots (row by row) followed by down slots (column by column).

    Crossings are wired in both directions: a cell covered by one across and
    one down slot gives each slot a :class:`Crossing` pointing at the other.
    """

    slots: List[Slot] = []
    coverage: Dict[Tuple[int, int], List[Tuple[int, int, Direction]]] = defaultdict(list)

    for direction in (Direction.ACROSS, Direction.DOWN):
        for run in find_runs(template, direction):
            if run.length < min_length:
                continue
            if direction is Direction.ACROSS:
                slot = Slot(row=run.line, col=run.start, direction=direction, length=run.length)
            else:
                slot = Slot(row=run.start, col=run.line, direction=direction, length=run.length)
            index = len(slots)
            slots.append(slot)
            for pos, cell in enumerate(slot.cells):
                coverage[cell].append((index, pos, direction))

    for entries in coverage.values():
        if len(entries) != 2:
            continue
        (a_idx, a_pos, a_dir), (b_idx, b_pos, b_dir) = entries
        if a_dir is b_dir:
            continue
        slots[a_idx].crossings.append(Crossing(a_pos, b_idx, b_pos))
        slots[b_idx].crossings.append(Crossing(b_pos, a_idx, a_pos))

    return slots
