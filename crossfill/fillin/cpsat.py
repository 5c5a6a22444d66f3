"""CP-SAT fill-in backend using OR-Tools."""

from __future__ import annotations

from collections import defaultdict
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model

from ..core.models import Slot
from ..utils.logger import get_logger
from .solver import WordsByLength

LOGGER = get_logger(__name__)


def solve_with_cpsat(
    slots: Sequence[Slot],
    words_by_length: WordsByLength,
    timeout: float = 10.0,
    max_candidates: int = 2000,
    num_workers: int = 4,
) -> Optional[List[Optional[str]]]:
    """Fill every slot via CP-SAT.

    Args:
        slots: Slots of one template, crossings wired.
        words_by_length: Candidate words per length, most playable first.
        timeout: Solver time limit in seconds.
        max_candidates: Max candidates per slot.
        num_workers: CP-SAT search workers.

    Returns:
        One word per slot, or None if no complete fill was found.
    """
    if not slots:
        return []

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Cell letter variables
    # ------------------------------------------------------------------
    cell_vars: Dict[Tuple[int, int], cp_model.IntVar] = {}
    for slot in slots:
        for r, c in slot.cells:
            if (r, c) not in cell_vars:
                cell_vars[(r, c)] = model.new_int_var(0, 25, f'L_{r}_{c}')

    # ------------------------------------------------------------------
    # Step 2: Per-slot word candidates + table constraints
    # ------------------------------------------------------------------
    for slot in slots:
        candidates = list(words_by_length.get(slot.length, ()))[:max_candidates]
        if not candidates:
            LOGGER.debug(
                "No candidates for slot at (%d,%d) dir=%s len=%d",
                slot.row, slot.col, slot.direction.value, slot.length,
            )
            return None  # infeasible
        model.add_allowed_assignments(
            [cell_vars[cell] for cell in slot.cells],
            [[ord(ch) - ord('A') for ch in word] for word in candidates],
        )

    # ------------------------------------------------------------------
    # Step 3: Uniqueness constraints
    # ------------------------------------------------------------------
    by_length: Dict[int, List[Slot]] = defaultdict(list)
    for slot in slots:
        by_length[slot.length].append(slot)

    for group in by_length.values():
        for s1, s2 in combinations(group, 2):
            _add_differ_constraint(model, cell_vars, s1, s2)

    # ------------------------------------------------------------------
    # Step 4: Solve
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = num_workers

    LOGGER.info(
        "CP-SAT: %d slots, %d cell vars, solving (timeout=%0.1fs)...",
        len(slots), len(cell_vars), timeout,
    )
    status = solver.solve(model)

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None

    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

    # ------------------------------------------------------------------
    # Step 5: Extract solution
    # ------------------------------------------------------------------
    return [
        ''.join(chr(solver.value(cell_vars[cell]) + ord('A')) for cell in slot.cells)
        for slot in slots
    ]


def _add_differ_constraint(model, cell_vars, s1: Slot, s2: Slot) -> None:
    """Ensure two same-length slots cannot contain identical words."""
    cells1, cells2 = s1.cells, s2.cells
    diffs = []
    for pos in range(s1.length):
        if cells1[pos] == cells2[pos]:
            continue  # Shared cell, always the same letter
        v1 = cell_vars[cells1[pos]]
        v2 = cell_vars[cells2[pos]]
        b = model.new_bool_var(
            f'd_{s1.row}_{s1.col}{s1.direction.value}_'
            f'{s2.row}_{s2.col}{s2.direction.value}_{pos}'
        )
        model.add(v1 != v2).only_enforce_if(b)
        model.add(v1 == v2).only_enforce_if(~b)
        diffs.append(b)
    if diffs:
        model.add_bool_or(diffs)
