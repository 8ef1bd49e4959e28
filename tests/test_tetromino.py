from __future__ import annotations

from collections import Counter
import random

import numpy as np
import pytest

from tetris_ai.exceptions import InvalidKindError, InvalidRotationError
from tetris_ai.tetromino import (
    TetrominoType,
    all_kinds,
    matrix_height,
    matrix_width,
    occupancy_matrix,
    placements,
    random_kind,
    rotation_count,
)


def _rows(matrix: np.ndarray) -> tuple[str, ...]:
    return tuple("".join("#" if cell else "." for cell in row) for row in matrix)


EXPECTED_SHAPES = {
    TetrominoType.I: [("#", "#", "#", "#"), ("####",)],
    TetrominoType.J: [(".#", ".#", "##"), ("#..", "###"), ("##", "#.", "#."), ("###", "..#")],
    TetrominoType.L: [("#.", "#.", "##"), ("###", "#.."), ("##", ".#", ".#"), ("..#", "###")],
    TetrominoType.O: [("##", "##")],
    TetrominoType.S: [(".##", "##."), ("#.", "##", ".#")],
    TetrominoType.T: [("###", ".#."), (".#", "##", ".#"), (".#.", "###"), ("#.", "##", "#.")],
    TetrominoType.Z: [("##.", ".##"), (".#", "##", "#.")],
}


def test_all_kinds_is_stable_and_excludes_empty() -> None:
    kinds = all_kinds()
    assert len(kinds) == 7
    assert kinds == all_kinds()
    assert TetrominoType.EMPTY not in kinds
    assert [k.value for k in kinds] == ["I", "J", "L", "O", "S", "T", "Z"]


@pytest.mark.parametrize(
    "kind, count",
    [
        (TetrominoType.I, 2),
        (TetrominoType.J, 4),
        (TetrominoType.L, 4),
        (TetrominoType.O, 1),
        (TetrominoType.S, 2),
        (TetrominoType.T, 4),
        (TetrominoType.Z, 2),
    ],
)
def test_rotation_counts(kind: TetrominoType, count: int) -> None:
    assert rotation_count(kind) == count


@pytest.mark.parametrize("kind", list(EXPECTED_SHAPES))
def test_occupancy_matrices_match_reference_shapes(kind: TetrominoType) -> None:
    shapes = [_rows(occupancy_matrix(kind, r)) for r in range(rotation_count(kind))]
    assert shapes == EXPECTED_SHAPES[kind]


def test_matrices_are_minimal_and_have_four_cells() -> None:
    for kind in all_kinds():
        for rotation in range(rotation_count(kind)):
            matrix = occupancy_matrix(kind, rotation)
            assert matrix.dtype == bool
            assert int(matrix.sum()) == 4
            assert matrix.any(axis=1).all()
            assert matrix.any(axis=0).all()
            assert matrix.shape == (matrix_height(kind, rotation), matrix_width(kind, rotation))


def test_matrices_are_read_only() -> None:
    matrix = occupancy_matrix(TetrominoType.T, 0)
    with pytest.raises(ValueError):
        matrix[0, 0] = False
    assert occupancy_matrix(TetrominoType.T, 0) is matrix


def test_empty_and_unknown_kinds_are_rejected() -> None:
    with pytest.raises(InvalidKindError):
        rotation_count(TetrominoType.EMPTY)
    with pytest.raises(InvalidKindError):
        occupancy_matrix(TetrominoType.EMPTY, 0)
    with pytest.raises(InvalidKindError):
        rotation_count(8)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "kind, rotation",
    [(TetrominoType.I, 2), (TetrominoType.J, 4), (TetrominoType.O, 1), (TetrominoType.S, -1)],
)
def test_out_of_range_rotation_is_rejected(kind: TetrominoType, rotation: int) -> None:
    with pytest.raises(InvalidRotationError):
        occupancy_matrix(kind, rotation)


def test_placements_cover_every_fitting_column() -> None:
    moves = placements(TetrominoType.I, 10)
    # Vertical: 10 columns, horizontal: 7 columns.
    assert len(moves) == 17
    assert moves[0] == (0, 0)
    assert moves[-1] == (1, 6)
    assert len(placements(TetrominoType.O, 10)) == 9
    assert len(placements(TetrominoType.T, 10)) == 8 + 9 + 8 + 9


def test_random_kind_is_uniform_over_placeable_kinds() -> None:
    rng = random.Random(7)
    counts = Counter(random_kind(rng) for _ in range(7000))
    assert set(counts) == set(all_kinds())
    assert all(800 < n < 1200 for n in counts.values())
