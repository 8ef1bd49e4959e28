"""Tetris board simulation and a minimax placement search."""

from .board import Board, DropResult
from .tetromino import (
    TetrominoType,
    all_kinds,
    occupancy_matrix,
    random_kind,
    rotation_count,
)
from .features import HeuristicWeights, utility
from .ai import Placement, SearchEngine, SearchResult
from .exceptions import (
    GameAlreadyOverError,
    InvalidColumnError,
    InvalidKindError,
    InvalidRotationError,
    NoLegalMoveError,
    TetrisAIError,
)
from .perf import PerfStat, PerformanceTracker
from .utils import render_ascii, render_grid

__all__ = [
    "Board",
    "DropResult",
    "TetrominoType",
    "all_kinds",
    "occupancy_matrix",
    "random_kind",
    "rotation_count",
    "HeuristicWeights",
    "utility",
    "Placement",
    "SearchEngine",
    "SearchResult",
    "TetrisAIError",
    "NoLegalMoveError",
    "InvalidKindError",
    "InvalidRotationError",
    "InvalidColumnError",
    "GameAlreadyOverError",
    "PerfStat",
    "PerformanceTracker",
    "render_ascii",
    "render_grid",
]
