"""Pretty-print helpers for finished puzzles."""

from __future__ import annotations

import sys
from collections import Counter
from typing import Optional

from ..core.constants import Direction
from ..core.models import CrosswordData


BLACK = "#"


def format_grid(result: CrosswordData) -> str:
    width = result.width
    if width == 0 or result.height == 0:
        return "(empty grid)"
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(result.grid):
        row_render = " ".join(f"{cell or BLACK:>2}" for cell in row)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def print_crossword_stats(result: CrosswordData, *, seed: Optional[int] = None, stream=None) -> None:
    """Print grid, clue list and summary stats for a finished puzzle."""

    stream = stream or sys.stdout
    print(format_grid(result), file=stream)

    # --- Grid geometry ---
    total_cells = result.width * result.height
    letters = result.filled_cells
    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Type:          {result.puzzle_type.value}", file=stream)
    print(f"  Size:          {result.height} x {result.width} ({total_cells} cells)", file=stream)
    if total_cells:
        print(f"  Letters:       {letters} ({letters / total_cells * 100:.0f}%)", file=stream)

    # --- Word stats ---
    lengths = [len(w.word) for w in result.words]
    print(file=stream)
    print("--- Words ---", file=stream)
    print(f"  Total words:   {len(result.words)}", file=stream)
    print(f"  Avg playability: {result.avg_playability}", file=stream)
    if lengths:
        dist_parts = [f"{l}:{c}" for l, c in sorted(Counter(lengths).items())]
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)

    # --- Clues ---
    for direction in (Direction.ACROSS, Direction.DOWN):
        entries = [w for w in result.words if w.direction is direction]
        if not entries:
            continue
        print(file=stream)
        print(f"--- {direction.value.capitalize()} ---", file=stream)
        for w in entries:
            clue = f" - {w.definition}" if w.definition else ""
            print(f"  {w.clue_number:>3}. {w.word}{clue}", file=stream)

    if seed is not None:
        print(file=stream)
        print(f"Seed: {seed}", file=stream)
