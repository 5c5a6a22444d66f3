"""Dictionary index shared by both puzzle engines."""

from __future__ import annotations

import functools
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..core.constants import MAX_WORD_LENGTH, MAX_WORDS_PER_LENGTH, MIN_SLOT_LENGTH
from ..core.models import WordEntry
from ..utils.logger import get_logger
from .normalization import clean_word
from .wordlist import load_playability, load_wordlist


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class DictionaryConfig:
    """Configuration for dictionary loading and the per-length buckets."""

    wordlist_path: Path | str
    playability_path: Path | str | None = None
    min_length: int = MIN_SLOT_LENGTH
    max_length: int = MAX_WORD_LENGTH
    max_per_length: int = MAX_WORDS_PER_LENGTH


class DictionaryIndex:
    """Read-only word index: membership, playability and length buckets.

    Built once from a word source and never mutated afterwards, so a single
    instance can be shared by concurrent generation requests.
    """

    def __init__(
        self,
        entries: Iterable[WordEntry],
        playability: Optional[Mapping[str, int]] = None,
        *,
        min_length: int = MIN_SLOT_LENGTH,
        max_length: int = MAX_WORD_LENGTH,
        max_per_length: int = MAX_WORDS_PER_LENGTH,
    ) -> None:
        self._playability: Dict[str, int] = {
            word: max(0, score) for word, score in (playability or {}).items()
        }
        self._entries: Dict[str, WordEntry] = {}
        for entry in entries:
            if entry.word and entry.word not in self._entries:
                self._entries[entry.word] = entry
        self._valid_words = frozenset(self._entries)

        self._by_length: Dict[int, Tuple[str, ...]] = {}
        self._position_index: Dict[int, Dict[Tuple[int, str], Set[str]]] = defaultdict(
            lambda: defaultdict(set)
        )
        buckets: Dict[int, List[str]] = defaultdict(list)
        for word in self._entries:
            if min_length <= len(word) <= max_length:
                buckets[len(word)].append(word)
        for length, words in buckets.items():
            # sort() is stable, so ties keep source order
            words.sort(key=self.playability, reverse=True)
            kept = tuple(words[:max_per_length])
            self._by_length[length] = kept
            length_index = self._position_index[length]
            for word in kept:
                for pos, char in enumerate(word):
                    length_index[(pos, char)].add(word)
        LOGGER.debug(
            "Dictionary index built: %d words, %d length buckets",
            len(self._valid_words),
            len(self._by_length),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._valid_words)

    def __contains__(self, word: object) -> bool:
        return word in self._valid_words

    def is_valid_word(self, word: str) -> bool:
        return word in self._valid_words

    def playability(self, word: str) -> int:
        return self._playability.get(word, 0)

    def entry(self, word: str) -> Optional[WordEntry]:
        return self._entries.get(word)

    def definition(self, word: str) -> str:
        entry = self._entries.get(word)
        return entry.definition if entry else ""

    def words_of_length(self, length: int) -> Tuple[str, ...]:
        """Words of ``length`` by descending playability, capped per length."""

        return self._by_length.get(length, ())

    def lengths(self) -> List[int]:
        return sorted(self._by_length)

    def has_lengths(self, lengths: Iterable[int]) -> bool:
        return all(self._by_length.get(length) for length in lengths)

    def find_candidates(
        self,
        length: int,
        pattern: Optional[Sequence[Optional[str]]] = None,
        banned: Optional[Set[str]] = None,
        limit: Optional[int] = None,
    ) -> List[str]:
        """Return bucket words matching ``pattern`` in playability order.

        ``pattern`` is a sequence describing each cell (letter or ``None``).
        """

        matching = self._index_lookup(length, pattern)
        if not matching:
            return []
        banned = banned or set()
        result: List[str] = []
        for word in self._by_length[length]:
            if word in matching and word not in banned:
                result.append(word)
                if limit is not None and len(result) >= limit:
                    break
        return result

    def _index_lookup(
        self,
        length: int,
        pattern: Optional[Sequence[Optional[str]]],
    ) -> Optional[Set[str]]:
        """Use positional index to find matching words via set intersection."""
        if length not in self._by_length:
            return None

        length_index = self._position_index[length]
        constraints: List[Set[str]] = []
        if pattern:
            for pos, letter in enumerate(pattern):
                if letter is not None:
                    match_set = length_index.get((pos, letter))
                    if match_set is None:
                        return set()
                    constraints.append(match_set)

        if not constraints:
            return set(self._by_length[length])

        # Intersect smallest sets first for speed
        constraints.sort(key=len)
        result = set(constraints[0])
        for s in constraints[1:]:
            result &= s
            if not result:
                return set()
        return result


def build_dictionary(config: DictionaryConfig) -> DictionaryIndex:
    wordlist = load_wordlist(config.wordlist_path)
    playability = load_playability(config.playability_path) if config.playability_path else {}
    return DictionaryIndex(
        wordlist.entries,
        playability,
        min_length=config.min_length,
        max_length=config.max_length,
        max_per_length=config.max_per_length,
    )


@functools.lru_cache(maxsize=None)
def load_dictionary(
    wordlist_path: str,
    playability_path: Optional[str] = None,
) -> DictionaryIndex:
    """Build the process-wide dictionary for a word list once and reuse it."""

    return build_dictionary(DictionaryConfig(wordlist_path=wordlist_path, playability_path=playability_path))


def normalize_entries(entries: Iterable[WordEntry]) -> List[WordEntry]:
    """Uppercase and strip user-supplied entries, dropping empties and repeats."""

    seen: Set[str] = set()
    cleaned: List[WordEntry] = []
    for entry in entries:
        word = clean_word(entry.word)
        if not word or word in seen:
            continue
        seen.add(word)
        cleaned.append(entry if word == entry.word else WordEntry(word=word, definition=entry.definition))
    return cleaned
