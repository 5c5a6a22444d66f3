"""Backtracking constraint solver for fill-in slots.

Slots are variables, dictionary words of the slot's length are values.
Variable choice uses MRV (fewest remaining words, ties to the slot with more
crossings); every assignment forward-checks its crossing neighbours and logs
the pruned words so a backtrack restores the domains exactly. The search
state is a pair of flat lists indexed by slot id and is mutated in place.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Set

from ..core.models import Slot
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

WordsByLength = Mapping[int, Sequence[str]]

DEFAULT_MAX_BACKTRACKS = 20_000
DEFAULT_SHUFFLE_TOP = 30


@dataclass
class SolverState:
    assignments: List[Optional[str]]
    domains: List[Set[str]]

    @classmethod
    def initial(cls, slots: Sequence[Slot], words_by_length: WordsByLength) -> "SolverState":
        return cls(
            assignments=[None] * len(slots),
            domains=[set(words_by_length.get(slot.length, ())) for slot in slots],
        )

    @property
    def filled_count(self) -> int:
        return sum(1 for word in self.assignments if word is not None)


@dataclass
class PrunedDomain:
    """Words removed from one neighbour's domain by a single assignment."""

    slot_idx: int
    removed: List[str]


@dataclass
class BestPartial:
    assignments: List[Optional[str]]
    filled_count: int = 0


@dataclass
class SearchContext:
    """Everything the recursion shares besides the slot state itself."""

    words_by_length: WordsByLength
    rng: random.Random
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS
    shuffle_top: int = DEFAULT_SHUFFLE_TOP
    used: Set[str] = field(default_factory=set)
    backtracks: int = 0
    best: Optional[BestPartial] = None


@dataclass
class SolveResult:
    solved: bool
    assignments: List[Optional[str]]
    best: BestPartial
    backtracks: int


def select_slot(state: SolverState, slots: Sequence[Slot]) -> int:
    """Index of the next slot to assign, or -1 when every slot is filled."""

    best_idx = -1
    best_size = None
    best_crossings = -1
    for idx, assigned in enumerate(state.assignments):
        if assigned is not None:
            continue
        size = len(state.domains[idx])
        crossings = len(slots[idx].crossings)
        if best_size is None or size < best_size or (size == best_size and crossings > best_crossings):
            best_idx = idx
            best_size = size
            best_crossings = crossings
    return best_idx


def ordered_candidates(
    slot_idx: int,
    slots: Sequence[Slot],
    state: SolverState,
    context: SearchContext,
) -> List[str]:
    """Domain words that are unused and agree with every assigned crossing.

    Words come out in playability order with the leading ``shuffle_top``
    shuffled through the context RNG.
    """

    slot = slots[slot_idx]
    domain = state.domains[slot_idx]
    candidates: List[str] = []
    for word in context.words_by_length.get(slot.length, ()):
        if word not in domain or word in context.used:
            continue
        consistent = True
        for crossing in slot.crossings:
            other = state.assignments[crossing.other_slot_idx]
            if other is not None and word[crossing.index_in_slot] != other[crossing.index_in_other_slot]:
                consistent = False
                break
        if consistent:
            candidates.append(word)

    head = candidates[: context.shuffle_top]
    context.rng.shuffle(head)
    candidates[: len(head)] = head
    return candidates


def forward_check(slot_idx: int, word: str, slots: Sequence[Slot], state: SolverState) -> List[PrunedDomain]:
    """Prune unassigned neighbours to words agreeing with ``word``."""

    pruned: List[PrunedDomain] = []
    for crossing in slots[slot_idx].crossings:
        other = crossing.other_slot_idx
        if state.assignments[other] is not None:
            continue
        letter = word[crossing.index_in_slot]
        pos = crossing.index_in_other_slot
        domain = state.domains[other]
        removed = [w for w in domain if w[pos] != letter]
        if removed:
            domain.difference_update(removed)
            pruned.append(PrunedDomain(other, removed))
    return pruned


def restore_domains(pruned: Sequence[PrunedDomain], state: SolverState) -> None:
    for entry in pruned:
        state.domains[entry.slot_idx].update(entry.removed)


def backtrack(slots: Sequence[Slot], state: SolverState, context: SearchContext, depth: int = 0) -> bool:
    """Depth-first search; ``True`` once every slot holds a word.

    ``context.best`` keeps a copy of the deepest assignment reached, since
    an unsuccessful search unwinds every assignment it made.
    """

    if context.best is None:
        context.best = BestPartial(assignments=[None] * len(slots))
    if depth > context.best.filled_count:
        context.best = BestPartial(assignments=list(state.assignments), filled_count=depth)

    idx = select_slot(state, slots)
    if idx == -1:
        return True

    for word in ordered_candidates(idx, slots, state, context):
        state.assignments[idx] = word
        context.used.add(word)

        pruned = forward_check(idx, word, slots, state)
        wipeout = any(not state.domains[entry.slot_idx] for entry in pruned)
        if not wipeout and backtrack(slots, state, context, depth + 1):
            return True

        context.backtracks += 1
        state.assignments[idx] = None
        context.used.discard(word)
        restore_domains(pruned, state)

        if context.backtracks >= context.max_backtracks:
            return False

    return False


def solve(
    slots: Sequence[Slot],
    words_by_length: WordsByLength,
    rng: Optional[random.Random] = None,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
    shuffle_top: int = DEFAULT_SHUFFLE_TOP,
) -> SolveResult:
    """Fill ``slots`` from ``words_by_length`` with distinct, crossing-consistent words.

    Returns the full assignment when solved. Otherwise ``assignments`` is all
    ``None`` and ``best`` holds the deepest partial fill seen.
    """

    state = SolverState.initial(slots, words_by_length)
    context = SearchContext(
        words_by_length=words_by_length,
        rng=rng or random.Random(),
        max_backtracks=max_backtracks,
        shuffle_top=shuffle_top,
    )
    solved = backtrack(slots, state, context)
    best = context.best or BestPartial(assignments=[None] * len(slots))
    if solved:
        best = BestPartial(assignments=list(state.assignments), filled_count=len(slots))

    LOGGER.debug(
        "CSP %s: %d slots, best %d filled, %d backtracks",
        "solved" if solved else "gave up",
        len(slots),
        best.filled_count,
        context.backtracks,
    )
    return SolveResult(
        solved=solved,
        assignments=list(state.assignments),
        best=best,
        backtracks=context.backtracks,
    )
