"""Board representation for the Tetris playfield.

The board only changes through :meth:`Board.drop`: a piece is released at a
rotation and a column, falls straight down, locks, and full rows are cleared.
Column heights and buried holes are kept up to date after every drop so that
the search engine can score boards without rescanning the grid.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray

from .exceptions import GameAlreadyOverError, InvalidColumnError
from .features import column_profile
from .tetromino import KIND_CODES, KINDS_BY_CODE, TetrominoType, occupancy_matrix


LOGGER = logging.getLogger(__name__)

# Dimensions of the standard Tetris board.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]


@dataclass(frozen=True)
class DropResult:
    """Outcome of :meth:`Board.drop`.

    ``row`` is the board row of the piece's top edge once it came to rest
    and ``lines`` the number of rows the drop cleared.
    """

    game_over: bool
    row: int = 0
    lines: int = 0

    @property
    def ok(self) -> bool:
        return not self.game_over


class Board:
    """Tetris board holding the locked cells and running statistics."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width < 4 or height < 4:
            raise ValueError("Board must be at least 4x4 to fit every tetromino")
        self.width = width
        self.height = height
        self.grid: Grid = np.zeros((height, width), dtype=np.uint8)
        self.game_over = False
        self.lines_cleared = 0
        self.pieces_dropped = 0
        self._heights = np.zeros(width, dtype=np.int_)
        self._holes = np.zeros(width, dtype=np.int_)

    @classmethod
    def from_rows(cls, rows: Sequence[str], height: int = HEIGHT) -> "Board":
        """Build a board from text rows describing its bottom, top row first.

        ``.`` marks an empty cell and a piece letter an occupied one.  Rows
        above the given ones start empty.  Counters start at zero and full
        rows are kept as given.  This helper exists for tests and demos that
        need a specific position.
        """

        if not rows or len(rows) > height:
            raise ValueError("Row count must be between 1 and the board height")
        width = len(rows[0])
        board = cls(width=width, height=height)
        offset = height - len(rows)
        for r, text in enumerate(rows):
            if len(text) != width:
                raise ValueError("Row width mismatch")
            for c, letter in enumerate(text):
                board.grid[offset + r, c] = KIND_CODES[TetrominoType(letter)]
        board._refresh_columns(0, board.width)
        return board

    def clone(self) -> "Board":
        """Return an independent deep copy of the board."""

        other = Board.__new__(Board)
        other.width = self.width
        other.height = self.height
        other.grid = self.grid.copy()
        other.game_over = self.game_over
        other.lines_cleared = self.lines_cleared
        other.pieces_dropped = self.pieces_dropped
        other._heights = self._heights.copy()
        other._holes = self._holes.copy()
        return other

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def cell_at(self, row: int, col: int) -> TetrominoType:
        """Return the piece kind locked at ``(row, col)``.

        Rows are numbered from the top, columns from the left.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        if 0 <= row < self.height and 0 <= col < self.width:
            return KINDS_BY_CODE[self.grid[row, col]]
        raise IndexError(f"Cell out of bounds: ({row}, {col})")

    def column_heights(self) -> NDArray[np.int_]:
        """Return a read-only view of the per-column heights."""

        view = self._heights.view()
        view.setflags(write=False)
        return view

    def column_holes(self) -> NDArray[np.int_]:
        """Return a read-only view of the per-column buried hole counts."""

        view = self._holes.view()
        view.setflags(write=False)
        return view

    def is_empty(self) -> bool:
        return not self.grid.any()

    def as_kinds(self) -> List[List[TetrominoType]]:
        """Return the grid as rows of :class:`TetrominoType` values."""

        return [[KINDS_BY_CODE[value] for value in row] for row in self.grid]

    # ------------------------------------------------------------------
    # Drop
    # ------------------------------------------------------------------
    def drop(self, kind: TetrominoType, rotation: int, column: int) -> DropResult:
        """Drop ``kind`` at ``rotation`` with its leftmost cell in ``column``.

        A drop that cannot even enter the board ends the game: the piece is
        still stamped into the top rows and ``DropResult.game_over`` is set.

        Raises:
            InvalidKindError: If ``kind`` is ``EMPTY`` or not a tetromino.
            InvalidRotationError: If ``rotation`` is out of range for ``kind``.
            InvalidColumnError: If the piece would stick out of the board.
            GameAlreadyOverError: If the game on this board is already over.
        """

        matrix = occupancy_matrix(kind, rotation)
        m_height, m_width = matrix.shape
        if column < 0 or column + m_width > self.width:
            raise InvalidColumnError(
                f"Invalid column {column} for tetromino {TetrominoType(kind).value}, "
                f"rotation {rotation}"
            )
        if self.game_over:
            raise GameAlreadyOverError("Cannot drop: game is over")

        code = np.uint8(KIND_CODES[kind])

        if not self._fits(matrix, 0, column):
            self.game_over = True
            window = self.grid[0:m_height, column : column + m_width]
            window[matrix] = code
            self._refresh_columns(column, column + m_width)
            LOGGER.debug(
                "Game over after %d pieces: %s does not fit at column %d",
                self.pieces_dropped,
                TetrominoType(kind).value,
                column,
            )
            return DropResult(game_over=True)

        row = self._landing_row(matrix, column)
        window = self.grid[row : row + m_height, column : column + m_width]
        window[matrix] = code
        self.pieces_dropped += 1

        cleared = self._clear_full_rows()
        if cleared:
            self._refresh_columns(0, self.width)
        else:
            self._refresh_columns(column, column + m_width)
        return DropResult(game_over=False, row=row, lines=cleared)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _fits(self, matrix: NDArray[np.bool_], row: int, column: int) -> bool:
        m_height, m_width = matrix.shape
        if row < 0 or row + m_height > self.height:
            return False
        window = self.grid[row : row + m_height, column : column + m_width]
        return not np.any(window[matrix])

    def _landing_row(self, matrix: NDArray[np.bool_], column: int) -> int:
        """Return the lowest row the piece reaches falling from row ``0``.

        Equivalent to moving the piece down one row at a time until the next
        step would collide.  Every tetromino column is a contiguous run of
        cells, so the first collision in a board column is with the first
        occupied cell below the run's top edge when the piece sits at row 0.
        """

        m_height = matrix.shape[0]
        landing = self.height - m_height
        for local_col in range(matrix.shape[1]):
            cells = np.flatnonzero(matrix[:, local_col])
            top, bottom = int(cells[0]), int(cells[-1])
            below = np.flatnonzero(self.grid[top:, column + local_col])
            if below.size:
                first_blocked = top + int(below[0])
                landing = min(landing, first_blocked - bottom - 1)
        return landing

    def _clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed."""

        full_rows = np.all(self.grid != 0, axis=1)
        cleared = int(np.count_nonzero(full_rows))
        if cleared:
            remaining = self.grid[~full_rows]
            new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
            self.grid = np.vstack((new_rows, remaining))
            self.lines_cleared += cleared
        return cleared

    def _refresh_columns(self, start: int, stop: int) -> None:
        heights, holes = column_profile(self.grid[:, start:stop])
        self._heights[start:stop] = heights
        self._holes[start:stop] = holes


__all__ = ["Board", "DropResult", "WIDTH", "HEIGHT"]
