"""Utility helpers shared by the front ends."""

from __future__ import annotations

from typing import List

from .board import Board
from .tetromino import TetrominoType


def render_grid(board: Board) -> List[str]:
    """Return one string per board row.

    Empty cells are drawn as ``.`` and locked cells with the letter of the
    piece that filled them.
    """

    return ["".join(kind.value for kind in row) for row in board.as_kinds()]


def render_ascii(board: Board) -> str:
    """Return the board followed by a column index footer and line count."""

    lines = render_grid(board)
    footer = "".join(str(col % 10) for col in range(board.width))
    lines.append(f"{footer}   {board.lines_cleared}")
    return "\n".join(lines)


def format_elapsed(seconds: float) -> str:
    """Format a duration as ``mm:ss``; hours roll into the minutes."""

    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def parse_kind(text: str) -> TetrominoType:
    """Map a user supplied letter (case-insensitive) to a tetromino.

    Raises:
        ValueError: If ``text`` does not name one of the seven tetrominoes.
    """

    try:
        kind = TetrominoType(text.strip().upper())
    except ValueError:
        raise ValueError(f"Unknown tetromino {text!r}") from None
    if kind is TetrominoType.EMPTY:
        raise ValueError(f"Unknown tetromino {text!r}")
    return kind


__all__ = ["render_grid", "render_ascii", "format_elapsed", "parse_kind"]
