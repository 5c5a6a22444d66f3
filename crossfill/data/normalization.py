"""Shared helpers for word normalization."""

from __future__ import annotations

import re
import unicodedata

WORD_RE = re.compile(r"[^A-Z]")


def clean_word(text: str) -> str:
    """Return a normalized uppercase ASCII representation of ``text``."""

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii")
    return WORD_RE.sub("", ascii_text.upper())


__all__ = ["clean_word"]
