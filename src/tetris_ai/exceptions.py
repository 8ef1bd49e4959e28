"""Exceptions raised by the board and the search engine.

Two kinds of failures exist.  Contract violations (an invalid piece, rotation
or column, dropping on a finished board) subclass the built-in ``ValueError``
and ``RuntimeError`` so that they surface loudly as caller bugs.  The only
expected outcome that is reported through an exception is
:class:`NoLegalMoveError`, which front ends catch as the natural end of a
session.
"""

from __future__ import annotations


class TetrisAIError(Exception):
    """Base class for expected, recoverable outcomes of the engine."""


class NoLegalMoveError(TetrisAIError):
    """Every placement of the pending piece ends the game."""


class InvalidKindError(ValueError):
    """The empty sentinel or an unknown value was used as a piece."""


class InvalidRotationError(ValueError):
    """Rotation index outside ``range(rotation_count(kind))``."""


class InvalidColumnError(ValueError):
    """The piece would stick out of the board at the requested column."""


class GameAlreadyOverError(RuntimeError):
    """A move was requested on a board whose game has ended."""


__all__ = [
    "TetrisAIError",
    "NoLegalMoveError",
    "InvalidKindError",
    "InvalidRotationError",
    "InvalidColumnError",
    "GameAlreadyOverError",
]
