"""Terminal demo: watch the AI play.

Run with: ``python -m tetris_ai``

Pieces are drawn uniformly at random (or taken from ``--pieces``) and the
board is printed after every move until no placement survives.  Pass
``--help`` for the available options.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from time import sleep
from typing import Callable, Iterator, List, Optional, TextIO

from .ai import EVALUATION_DEPTH, SearchEngine
from .exceptions import NoLegalMoveError
from .tetromino import TetrominoType, random_kind
from .utils import parse_kind, render_ascii


LOGGER = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"


def parse_sequence(text: str) -> List[TetrominoType]:
    """Parse a piece sequence such as ``"IO TL"``; whitespace is ignored."""

    return [parse_kind(letter) for letter in text if not letter.isspace()]


def piece_source(
    rng: random.Random, sequence: Optional[List[TetrominoType]] = None
) -> Iterator[TetrominoType]:
    """Yield the pieces of the game.

    With ``sequence`` the pieces are played in order and the game ends when
    they run out; otherwise pieces are random forever.
    """

    if sequence is not None:
        yield from sequence
        return
    while True:
        yield random_kind(rng)


def play(
    engine: SearchEngine,
    pieces: Iterator[TetrominoType],
    *,
    lookahead: bool = True,
    max_pieces: Optional[int] = None,
    on_move: Optional[Callable[[SearchEngine], None]] = None,
) -> bool:
    """Play until the pieces run out, ``max_pieces`` are dropped or no move is
    left.  Returns ``True`` when the game ended because no move was left.
    """

    if lookahead:
        first = next(pieces, None)
        if first is None:
            return False
        engine.set_pending(first)

    while max_pieces is None or engine.board.pieces_dropped < max_pieces:
        kind = next(pieces, None)
        try:
            if not lookahead:
                if kind is None:
                    break
                engine.drop(kind)
            elif kind is None:
                # Last known piece: nothing follows it.
                engine.drop(engine.pending)
                break
            else:
                engine.commit_and_advance(kind)
        except NoLegalMoveError as exc:
            LOGGER.info("%s", exc)
            return True
        if on_move is not None:
            on_move(engine)
    return False


def _printer(stream: TextIO, delay: float, clear: bool) -> Callable[[SearchEngine], None]:
    def show(engine: SearchEngine) -> None:
        if clear:
            stream.write(CLEAR_SCREEN)
        stream.write(render_ascii(engine.board) + "\n")
        stream.flush()
        if delay > 0:
            sleep(delay)

    return show


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tetris_ai", description=__doc__)
    parser.add_argument("--delay", type=float, default=0.5, help="Seconds to pause between moves.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for pieces and tie-breaking.")
    parser.add_argument(
        "--depth",
        type=int,
        default=EVALUATION_DEPTH,
        help="Adversarial plies searched after the known pieces.",
    )
    parser.add_argument("--max-pieces", type=int, default=None, help="Stop after this many pieces.")
    parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Evaluate at most this many boards per move (deeper nodes become leaves).",
    )
    parser.add_argument("--pieces", default=None, help="Play this piece sequence, e.g. 'IOTLJSZ'.")
    parser.add_argument(
        "--no-lookahead",
        dest="lookahead",
        action="store_false",
        help="Ignore the next piece (cheaper search).",
    )
    parser.add_argument(
        "--no-clear",
        dest="clear",
        action="store_false",
        help="Do not clear the terminal between frames.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, stream: TextIO = sys.stdout) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s"
    )

    sequence = None
    if args.pieces is not None:
        try:
            sequence = parse_sequence(args.pieces)
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2

    rng = random.Random(args.seed)
    engine = SearchEngine(depth=args.depth, rng=rng, max_nodes=args.max_nodes)
    topped_out = play(
        engine,
        piece_source(rng, sequence),
        lookahead=args.lookahead,
        max_pieces=args.max_pieces,
        on_move=_printer(stream, args.delay, args.clear),
    )

    board = engine.board
    stream.write(render_ascii(board) + "\n")
    if topped_out:
        stream.write("Game over\n")
    stream.write(f"Pieces: {board.pieces_dropped}  Lines: {board.lines_cleared}\n")
    LOGGER.info("Finished after %d pieces, %d lines", board.pieces_dropped, board.lines_cleared)
    return 0


if __name__ == "__main__":
    sys.exit(main())
