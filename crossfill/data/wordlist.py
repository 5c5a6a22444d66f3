"""Word list and playability file loading.

Two word list layouts are understood:

- TSV with ``word``, ``definition`` and an optional comma separated
  ``themes`` column (a header row is detected and skipped).
- The themed JSON layout ``{"themes": [...], "words": [{"w", "d", "t"}]}``
  where ``t`` holds indices into ``themes``.

Playability files carry one ``"<score> <WORD>"`` entry per line.
"""

from __future__ import annotations

import csv
import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.exceptions import DictionaryLoadError
from ..core.models import WordEntry
from ..utils.logger import get_logger
from .normalization import clean_word


LOGGER = get_logger(__name__)

_HEADER_WORDS = {"word", "entry_word", "surface"}


@dataclass
class WordList:
    """Static word source returning ``WordEntry`` records."""

    entries: List[WordEntry]
    theme_names: List[str] = field(default_factory=list)
    theme_tags: Dict[str, Set[int]] = field(default_factory=dict)

    def themes(self) -> List[str]:
        return list(self.theme_names)

    def words_by_theme(
        self,
        theme: str,
        count: int,
        rng: Optional[random.Random] = None,
        min_length: int = 3,
        max_length: int = 15,
    ) -> List[WordEntry]:
        """Return up to ``count`` shuffled words tagged with ``theme``."""

        if theme not in self.theme_names:
            return []
        theme_idx = self.theme_names.index(theme)
        matching = [
            entry
            for entry in self.entries
            if theme_idx in self.theme_tags.get(entry.word, ())
            and min_length <= len(entry.word) <= max_length
        ]
        (rng or random.Random()).shuffle(matching)
        return matching[:count]

    def random_words(
        self,
        rng: Optional[random.Random] = None,
        min_count: int = 35,
        max_count: int = 45,
        min_length: int = 3,
        max_length: int = 15,
    ) -> List[WordEntry]:
        """Return a random selection of words suitable for a classic grid."""

        rng = rng or random.Random()
        suitable = [e for e in self.entries if min_length <= len(e.word) <= max_length]
        count = rng.randint(min_count, max_count)
        rng.shuffle(suitable)
        return suitable[:count]


def _build(records: Iterable[Tuple[str, str, Sequence[int]]], theme_names: Sequence[str]) -> WordList:
    entries: List[WordEntry] = []
    tags: Dict[str, Set[int]] = {}
    for raw_word, definition, theme_ids in records:
        word = clean_word(raw_word)
        if not word or word in tags:
            continue
        entries.append(WordEntry(word=word, definition=(definition or "").strip()))
        tags[word] = set(theme_ids)
    return WordList(entries=entries, theme_names=list(theme_names), theme_tags=tags)


def _load_json(path: Path) -> WordList:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        theme_names = [str(name) for name in payload.get("themes", [])]
        records = [
            (str(item["w"]), str(item.get("d") or ""), [int(t) for t in item.get("t", [])])
            for item in payload["words"]
        ]
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise DictionaryLoadError(f"Malformed word list {path}: {exc}") from exc
    return _build(records, theme_names)


def _load_tsv(path: Path) -> WordList:
    theme_names: List[str] = []
    records = []
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.reader(handle, delimiter="\t")
        for index, row in enumerate(reader):
            if not row or not row[0].strip() or row[0].startswith("#"):
                continue
            if index == 0 and row[0].strip().lower() in _HEADER_WORDS:
                continue
            definition = row[1] if len(row) > 1 else ""
            theme_ids = []
            if len(row) > 2:
                for name in filter(None, (part.strip() for part in row[2].split(","))):
                    if name not in theme_names:
                        theme_names.append(name)
                    theme_ids.append(theme_names.index(name))
            records.append((row[0], definition, theme_ids))
    return _build(records, theme_names)


def load_wordlist(path: Path | str) -> WordList:
    source = Path(path)
    if not source.exists():
        raise DictionaryLoadError(f"Missing word list: {source}")
    wordlist = _load_json(source) if source.suffix.lower() == ".json" else _load_tsv(source)
    LOGGER.info("Loaded %d words (%d themes) from %s", len(wordlist.entries), len(wordlist.theme_names), source)
    return wordlist


def parse_playability(lines: Iterable[str]) -> Dict[str, int]:
    scores: Dict[str, int] = {}
    for line in lines:
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        try:
            score = int(parts[0])
        except ValueError:
            continue
        if score < 0:
            continue
        word = clean_word(parts[1])
        if word:
            scores[word] = score
    return scores


def load_playability(path: Path | str) -> Dict[str, int]:
    source = Path(path)
    if not source.exists():
        raise DictionaryLoadError(f"Missing playability file: {source}")
    with source.open("r", encoding="utf-8") as handle:
        scores = parse_playability(handle)
    LOGGER.info("Loaded %d playability scores from %s", len(scores), source)
    return scores
