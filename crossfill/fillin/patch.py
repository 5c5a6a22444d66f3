"""Greedy completion of a partial fill-in assignment."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.models import Slot
from .solver import WordsByLength


def crossing_pattern(slot: Slot, assignments: Sequence[Optional[str]]) -> List[Optional[str]]:
    """Letters already fixed in ``slot`` by assigned crossing slots."""

    pattern: List[Optional[str]] = [None] * slot.length
    for crossing in slot.crossings:
        other = assignments[crossing.other_slot_idx]
        if other is not None:
            pattern[crossing.index_in_slot] = other[crossing.index_in_other_slot]
    return pattern


def matches_pattern(word: str, pattern: Sequence[Optional[str]]) -> bool:
    return all(letter is None or letter == word[i] for i, letter in enumerate(pattern))


def greedy_patch(
    slots: Sequence[Slot],
    assignments: Sequence[Optional[str]],
    words_by_length: WordsByLength,
) -> List[Optional[str]]:
    """Fill what can be filled without backtracking.

    Each pass visits unfilled slots with the most fixed crossing letters
    first and gives each the most playable unused word that fits. Passes
    repeat while they make progress. The input is not modified.
    """

    result = list(assignments)
    used = {word for word in result if word is not None}

    progress = True
    while progress:
        progress = False
        unfilled = [
            (idx, sum(1 for c in slots[idx].crossings if result[c.other_slot_idx] is not None))
            for idx, word in enumerate(result)
            if word is None
        ]
        unfilled.sort(key=lambda item: item[1], reverse=True)

        for idx, _ in unfilled:
            if result[idx] is not None:
                continue
            slot = slots[idx]
            pattern = crossing_pattern(slot, result)
            for word in words_by_length.get(slot.length, ()):
                if word not in used and matches_pattern(word, pattern):
                    result[idx] = word
                    used.add(word)
                    progress = True
                    break

    return result
