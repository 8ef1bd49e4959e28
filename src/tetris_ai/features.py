"""Board statistics and the heuristic used to rank placements.

The column profile helpers work on any 2D grid where ``0`` marks an empty
cell, so they double as the from-scratch reference for the statistics the
:class:`~tetris_ai.board.Board` maintains incrementally.  :func:`utility`
turns those statistics into a single score: taller stacks, buried holes and
bumpy surfaces are penalised while cleared lines are rewarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:  # pragma: no cover
    from .board import Board

# Bounds of the utility function.  A game-over board scores ``MIN_UTILITY``.
MIN_UTILITY = -1e5
MAX_UTILITY = 1e5


@dataclass(frozen=True)
class HeuristicWeights:
    """Weights of the linear evaluation function.

    All weights are magnitudes; :func:`utility` applies the sign.
    """

    height: float = 0.510066
    lines: float = 0.760666
    holes: float = 0.35663
    bumpiness: float = 0.184483


DEFAULT_WEIGHTS = HeuristicWeights()


def column_profile(grid: ArrayLike) -> Tuple[NDArray[np.int_], NDArray[np.int_]]:
    """Return ``(heights, holes)`` for every column of ``grid``.

    A column's height counts rows from its top-most occupied cell down to the
    floor; its holes are the empty cells strictly below that cell.
    """

    filled = np.asarray(grid) != 0
    rows = filled.shape[0]
    top = filled.argmax(axis=0)
    heights = np.where(filled.any(axis=0), rows - top, 0)
    holes = heights - filled.sum(axis=0)
    return heights.astype(np.int_), holes.astype(np.int_)


def column_heights(grid: ArrayLike) -> list[int]:
    return column_profile(grid)[0].tolist()


def count_holes(grid: ArrayLike) -> int:
    return int(column_profile(grid)[1].sum())


def bumpiness(heights: Sequence[int]) -> int:
    """Sum of absolute height differences between adjacent columns."""

    return int(np.abs(np.diff(np.asarray(heights))).sum())


def utility(board: "Board", weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    """Score ``board``; bigger is better.

    Raises:
        AssertionError: If the score leaves ``[MIN_UTILITY, MAX_UTILITY]``.
    """

    if board.game_over:
        return MIN_UTILITY

    heights = board.column_heights()
    holes = board.column_holes()
    score = (
        -weights.height * float(heights.sum())
        + weights.lines * board.lines_cleared
        - weights.holes * float(holes.sum())
        - weights.bumpiness * bumpiness(heights)
    )
    if not MIN_UTILITY <= score <= MAX_UTILITY:
        raise AssertionError(f"Invalid utility {score} returned")
    return score


__all__ = [
    "MIN_UTILITY",
    "MAX_UTILITY",
    "HeuristicWeights",
    "DEFAULT_WEIGHTS",
    "column_profile",
    "column_heights",
    "count_holes",
    "bumpiness",
    "utility",
]
