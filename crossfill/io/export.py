"""JSON export of finished puzzles.

The document is the puzzle's frontend shape (``grid``, ``words``,
``width``, ``height``, ``avgPlayability``, ``puzzleType``) and reads back
into an equal :class:`CrosswordData`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from ..core.constants import Direction, PuzzleType
from ..core.exceptions import CrosswordError
from ..core.models import CrosswordData, PlacedWord
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def to_json(result: CrosswordData) -> str:
    return json.dumps(result.to_jsonable(), ensure_ascii=False, indent=2)


def from_jsonable(doc: Dict[str, Any]) -> CrosswordData:
    try:
        words = [
            PlacedWord(
                word=item["word"],
                definition=item.get("definition", ""),
                row=int(item["row"]),
                col=int(item["col"]),
                direction=Direction(item["direction"]),
                clue_number=int(item["clueNumber"]),
            )
            for item in doc["words"]
        ]
        return CrosswordData(
            grid=[list(row) for row in doc["grid"]],
            words=words,
            width=int(doc["width"]),
            height=int(doc["height"]),
            avg_playability=int(doc.get("avgPlayability", 0)),
            puzzle_type=PuzzleType(doc.get("puzzleType", PuzzleType.CLASSIC.value)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CrosswordError(f"Malformed crossword document: {exc}") from exc


def write_json(result: CrosswordData, path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(result), encoding="utf-8")
    LOGGER.info("Crossword saved: %s", path)
    return path


def read_json(path: Path | str) -> CrosswordData:
    return from_jsonable(json.loads(Path(path).read_text(encoding="utf-8")))
