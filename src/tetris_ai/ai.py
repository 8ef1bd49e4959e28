"""Placement search for the falling tetromino.

:class:`SearchEngine` owns a live :class:`~tetris_ai.board.Board` and the
piece committed to fall next.  For each move it tries every rotation and
column of that piece on a cloned board, optionally every placement of the
already known following piece, and then assumes the worst about the unknown
piece after that: the position is scored by minimax with alpha-beta pruning,
where the searcher maximises over placements of a given kind and an adversary
picks the kind that minimises the searcher's best outcome.

Example usage
-------------

>>> from tetris_ai import SearchEngine, TetrominoType
>>> engine = SearchEngine(depth=0)
>>> engine.set_pending(TetrominoType.O)
>>> result = engine.commit_and_advance(TetrominoType.I)
>>> engine.board.pieces_dropped
1
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
import logging
import math
import random
from typing import ContextManager, List, Optional, Tuple

from .board import Board
from .exceptions import GameAlreadyOverError, NoLegalMoveError
from .features import DEFAULT_WEIGHTS, MAX_UTILITY, MIN_UTILITY, HeuristicWeights, utility
from .perf import PerformanceTracker
from .tetromino import TetrominoType, all_kinds, placements, rotation_count


LOGGER = logging.getLogger(__name__)

# Number of adversarial plies searched below the known pieces.
EVALUATION_DEPTH = 1


@dataclass(frozen=True)
class Placement:
    """Rotation index and leftmost column of a candidate drop."""

    rotation: int
    column: int


@dataclass(frozen=True)
class SearchResult:
    """Move committed by :class:`SearchEngine`."""

    placement: Placement
    value: float
    lines: int
    nodes: int


class SearchEngine:
    """Choose and play the best placement for each falling tetromino."""

    def __init__(
        self,
        board: Optional[Board] = None,
        *,
        depth: int = EVALUATION_DEPTH,
        weights: HeuristicWeights = DEFAULT_WEIGHTS,
        rng: Optional[random.Random] = None,
        max_nodes: Optional[int] = None,
        profiler: Optional[PerformanceTracker] = None,
    ) -> None:
        if depth < 0:
            raise ValueError("depth must be non-negative")
        self._board = board if board is not None else Board()
        self.depth = depth
        self.weights = weights
        self.max_nodes = max_nodes
        self.profiler = profiler
        self._rng = rng or random.Random()
        self._pending: Optional[TetrominoType] = None
        self._nodes = 0

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    @property
    def board(self) -> Board:
        """The live board.  Front ends must only read from it."""

        return self._board

    @property
    def pending(self) -> Optional[TetrominoType]:
        return self._pending

    def set_pending(self, kind: TetrominoType) -> None:
        """Set the piece that falls first.

        Normally called once before the first :meth:`commit_and_advance`;
        a later call replaces the pending piece.
        """

        rotation_count(kind)
        self._pending = TetrominoType(kind)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def commit_and_advance(self, next_kind: TetrominoType) -> SearchResult:
        """Drop the pending piece, taking ``next_kind`` into account.

        ``next_kind`` becomes the pending piece afterwards.

        Raises:
            NoLegalMoveError: If every placement of the pending piece ends
                the game.  The live board is left untouched.
        """

        rotation_count(next_kind)
        if self._pending is None:
            raise RuntimeError("No pending tetromino, call set_pending first")
        result = self._commit(self._pending, TetrominoType(next_kind))
        self._pending = TetrominoType(next_kind)
        return result

    def drop(self, kind: TetrominoType) -> SearchResult:
        """Drop ``kind`` searching only its own placements.

        Cheaper than :meth:`commit_and_advance` because no following piece
        is known; the pending piece is not affected.
        """

        rotation_count(kind)
        return self._commit(TetrominoType(kind), None)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def best_placements(
        self,
        board: Board,
        kind: TetrominoType,
        next_kind: Optional[TetrominoType] = None,
    ) -> Tuple[float, List[Placement]]:
        """Return the best value for ``kind`` on ``board`` and every placement
        reaching it.

        Placements whose own drop ends the game are skipped; the list is
        empty when none survives.  ``board`` is never modified.
        """

        self._nodes = 0
        best = MIN_UTILITY - 1
        best_moves: List[Placement] = []
        for rotation, column in placements(kind, board.width):
            after = board.clone()
            if after.drop(kind, rotation, column).game_over:
                continue
            # Values strictly above alpha come back exact, so ties are real.
            alpha = math.nextafter(best, -math.inf)
            value = self._score_placement(after, next_kind, alpha)
            move = Placement(rotation, column)
            if value > best:
                best = value
                best_moves = [move]
            elif value == best:
                best_moves.append(move)
        return best, best_moves

    def _score_placement(
        self, board: Board, next_kind: Optional[TetrominoType], alpha: float
    ) -> float:
        if next_kind is None:
            return self.evaluate(board, self.depth, alpha, MAX_UTILITY)

        best = MIN_UTILITY - 1
        for rotation, column in placements(next_kind, board.width):
            after = board.clone()
            after.drop(next_kind, rotation, column)
            value = self.evaluate(after, self.depth, max(alpha, best), MAX_UTILITY)
            if value > best:
                best = value
        return best

    def evaluate(self, board: Board, depth: int, alpha: float, beta: float) -> float:
        """Minimax value of ``board`` with ``depth`` unknown pieces to come.

        The adversary picks the kind; the searcher picks the placement.
        Placements that end the game are scored rather than skipped.  Once
        the node budget is spent every remaining node is scored as a leaf.
        """

        self._nodes += 1
        if depth <= 0 or board.game_over or self._budget_spent():
            return utility(board, self.weights)

        worst = MAX_UTILITY + 1
        for kind in all_kinds():
            best = MIN_UTILITY - 1
            kind_alpha = alpha
            for rotation, column in placements(kind, board.width):
                after = board.clone()
                after.drop(kind, rotation, column)
                value = self.evaluate(after, depth - 1, kind_alpha, beta)
                if value > best:
                    best = value
                    kind_alpha = max(kind_alpha, best)
                    if kind_alpha >= beta:
                        break

            worst = min(worst, best)
            beta = min(beta, worst)
            if alpha >= beta:
                break
        return worst

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _budget_spent(self) -> bool:
        return self.max_nodes is not None and self._nodes > self.max_nodes

    def _section(self, name: str) -> ContextManager[None]:
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    def _commit(self, kind: TetrominoType, next_kind: Optional[TetrominoType]) -> SearchResult:
        if self._board.game_over:
            raise GameAlreadyOverError(f"Cannot drop tetromino {kind.value}: game is over")

        with self._section("search"):
            value, moves = self.best_placements(self._board, kind, next_kind)
        nodes = self._nodes
        if self.profiler is not None:
            self.profiler.count("nodes", nodes)
        if not moves:
            raise NoLegalMoveError(
                f"Cannot drop tetromino {kind.value}: all moves lead to game over"
            )

        move = self._rng.choice(moves)
        with self._section("commit"):
            outcome = self._board.drop(kind, move.rotation, move.column)
        LOGGER.debug(
            "Dropped %s at rotation %d, column %d (value %.4f, %d equal moves, %d nodes)",
            kind.value,
            move.rotation,
            move.column,
            value,
            len(moves),
            nodes,
        )
        return SearchResult(placement=move, value=value, lines=outcome.lines, nodes=nodes)


__all__ = ["EVALUATION_DEPTH", "Placement", "SearchResult", "SearchEngine"]
