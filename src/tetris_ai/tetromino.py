"""Tetromino catalog: piece kinds, rotation counts and occupancy matrices.

Every rotation of every piece is stored as a minimally bounded boolean
matrix indexed ``[row, col]`` with row ``0`` on top.  The matrices are built
once at import time from the spawn orientation of each piece by repeated
clockwise rotation and are flagged read-only, so the table can be shared by
every board without copying.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple
import random

import numpy as np
from numpy.typing import NDArray

from .exceptions import InvalidKindError, InvalidRotationError

OccupancyMatrix = NDArray[np.bool_]


class TetrominoType(str, Enum):
    """The seven tetromino shapes plus the ``EMPTY`` cell marker.

    ``EMPTY`` only ever appears in board cells; it is never a placeable piece.
    The value of each member is the character used to render it.
    """

    EMPTY = "."
    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


ROTATION_COUNTS: Dict[TetrominoType, int] = {
    TetrominoType.I: 2,
    TetrominoType.J: 4,
    TetrominoType.L: 4,
    TetrominoType.O: 1,
    TetrominoType.S: 2,
    TetrominoType.T: 4,
    TetrominoType.Z: 2,
}

# Stable ordering used for enumeration during search.
KINDS: Tuple[TetrominoType, ...] = tuple(t for t in TetrominoType if t is not TetrominoType.EMPTY)

# Integer stored in the board grid for every member.  ``0`` must stay empty.
KIND_CODES: Dict[TetrominoType, int] = {t: i for i, t in enumerate(TetrominoType)}
KINDS_BY_CODE: Tuple[TetrominoType, ...] = tuple(TetrominoType)


# Spawn orientation of each piece, ``#`` marks an occupied cell.
_BASE_SHAPES: Dict[TetrominoType, Tuple[str, ...]] = {
    TetrominoType.I: ("#", "#", "#", "#"),
    TetrominoType.J: (".#", ".#", "##"),
    TetrominoType.L: ("#.", "#.", "##"),
    TetrominoType.O: ("##", "##"),
    TetrominoType.S: (".##", "##."),
    TetrominoType.T: ("###", ".#."),
    TetrominoType.Z: ("##.", ".##"),
}


def _parse(rows: Tuple[str, ...]) -> OccupancyMatrix:
    return np.array([[ch == "#" for ch in row] for row in rows], dtype=bool)


def _rotate(matrix: OccupancyMatrix) -> OccupancyMatrix:
    """Return ``matrix`` rotated 90 degrees clockwise.

    The shapes have no empty border, so the rotated matrix is already
    minimally bounded.
    """

    return np.ascontiguousarray(np.rot90(matrix, k=-1))


def _generate_rotations(matrix: OccupancyMatrix, count: int) -> Tuple[OccupancyMatrix, ...]:
    rotations: List[OccupancyMatrix] = []
    for _ in range(count):
        frozen = matrix.copy()
        frozen.setflags(write=False)
        rotations.append(frozen)
        matrix = _rotate(matrix)
    return tuple(rotations)


TETROMINO_MATRICES: Dict[TetrominoType, Tuple[OccupancyMatrix, ...]] = {
    t_type: _generate_rotations(_parse(rows), ROTATION_COUNTS[t_type])
    for t_type, rows in _BASE_SHAPES.items()
}


def _check_kind(kind: TetrominoType) -> TetrominoType:
    if kind not in ROTATION_COUNTS:
        raise InvalidKindError(f"Invalid tetromino {kind!r}")
    return TetrominoType(kind)


def all_kinds() -> Tuple[TetrominoType, ...]:
    """Return the seven placeable kinds in a stable order."""

    return KINDS


def rotation_count(kind: TetrominoType) -> int:
    """Return how many distinct rotations ``kind`` has (1, 2 or 4).

    Raises:
        InvalidKindError: If ``kind`` is ``EMPTY`` or not a tetromino.
    """

    return ROTATION_COUNTS[_check_kind(kind)]


def occupancy_matrix(kind: TetrominoType, rotation: int) -> OccupancyMatrix:
    """Return the read-only occupancy matrix for ``kind`` at ``rotation``.

    Unlike a free-falling piece, the rotation index is not wrapped: a value
    outside ``range(rotation_count(kind))`` is a caller bug.

    Raises:
        InvalidKindError: If ``kind`` is ``EMPTY`` or not a tetromino.
        InvalidRotationError: If ``rotation`` is out of range.
    """

    states = TETROMINO_MATRICES[_check_kind(kind)]
    if not 0 <= rotation < len(states):
        raise InvalidRotationError(
            f"Invalid rotation {rotation} for tetromino {TetrominoType(kind).value}"
        )
    return states[rotation]


def matrix_width(kind: TetrominoType, rotation: int) -> int:
    return occupancy_matrix(kind, rotation).shape[1]


def matrix_height(kind: TetrominoType, rotation: int) -> int:
    return occupancy_matrix(kind, rotation).shape[0]


@lru_cache(maxsize=None)
def placements(kind: TetrominoType, width: int) -> Tuple[Tuple[int, int], ...]:
    """Return every ``(rotation, column)`` that fits a board ``width`` wide.

    The order is rotation ascending, then column ascending.
    """

    moves: List[Tuple[int, int]] = []
    for rotation, matrix in enumerate(TETROMINO_MATRICES[_check_kind(kind)]):
        for column in range(width - matrix.shape[1] + 1):
            moves.append((rotation, column))
    return tuple(moves)


def random_kind(rng: Optional[random.Random] = None) -> TetrominoType:
    """Return a uniformly chosen placeable kind."""

    return (rng or random).choice(KINDS)


__all__ = [
    "TetrominoType",
    "OccupancyMatrix",
    "KINDS",
    "KIND_CODES",
    "KINDS_BY_CODE",
    "TETROMINO_MATRICES",
    "all_kinds",
    "rotation_count",
    "occupancy_matrix",
    "matrix_width",
    "matrix_height",
    "placements",
    "random_kind",
]
