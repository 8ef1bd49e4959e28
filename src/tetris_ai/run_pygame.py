"""Pygame viewer for the AI.

Shows the board, the next piece, the piece and line counters and the elapsed
time.  A welcome screen waits for space (or a click); on the play screen
``A`` toggles automatic mode and space (or a click on the button) drops one
piece when automatic mode is off.

Run with: ``python -m tetris_ai.run_pygame``

The session state lives in :class:`ViewerSession`, which does not touch
pygame so it can be driven directly from tests.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import time
from typing import Callable, Optional

import pygame

from .ai import SearchEngine
from .board import Board
from .exceptions import NoLegalMoveError
from .tetromino import TetrominoType, occupancy_matrix, random_kind
from .utils import format_elapsed


LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 30
# Milliseconds between pieces in automatic mode
DROP_INTERVAL_MS = 500
# Frames per second to run the loop at
FPS = 60

TETROMINO_COLORS = {
    TetrominoType.EMPTY: (14, 17, 17),
    TetrominoType.I: (238, 99, 82),
    TetrominoType.J: (8, 178, 227),
    TetrominoType.L: (49, 136, 139),
    TetrominoType.O: (33, 87, 237),
    TetrominoType.S: (87, 167, 115),
    TetrominoType.T: (76, 101, 99),
    TetrominoType.Z: (128, 35, 142),
}
BACKGROUND = (0, 0, 0)
BOARD_BACKGROUND_GAME_OVER = (255, 255, 255)
BORDER_COLOR = (100, 100, 100)
TEXT_COLOR = (200, 200, 200)


class Screen(Enum):
    WELCOME = "welcome"
    PLAY = "play"


@dataclass
class ViewerSession:
    """State of one viewing session, independent of rendering."""

    engine: SearchEngine
    rng: random.Random = field(default_factory=random.Random)
    interval_ms: int = DROP_INTERVAL_MS
    automatic: bool = False
    clock: Callable[[], float] = time.monotonic
    screen: Screen = Screen.WELCOME
    next_kind: Optional[TetrominoType] = None
    finished: bool = False
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    _accum_ms: float = 0.0

    @property
    def board(self) -> Board:
        return self.engine.board

    def start(self) -> None:
        """Leave the welcome screen and deal the first two pieces."""

        if self.screen is Screen.PLAY:
            return
        self.screen = Screen.PLAY
        self.started_at = self.clock()
        self.engine.set_pending(random_kind(self.rng))
        self.next_kind = random_kind(self.rng)
        LOGGER.info("Game started")

    def toggle_automatic(self) -> None:
        self.automatic = not self.automatic
        self._accum_ms = 0.0
        LOGGER.info("Automatic mode %s", "on" if self.automatic else "off")

    def step(self) -> bool:
        """Drop the pending piece; returns ``False`` once the game is over."""

        if self.screen is not Screen.PLAY or self.finished:
            return False
        assert self.next_kind is not None
        try:
            self.engine.commit_and_advance(self.next_kind)
        except NoLegalMoveError as exc:
            self.finished = True
            self.ended_at = self.clock()
            LOGGER.info("Game over after %d pieces: %s", self.board.pieces_dropped, exc)
            return False
        self.next_kind = random_kind(self.rng)
        return True

    def tick(self, dt_ms: float) -> None:
        """Advance automatic mode by ``dt_ms`` milliseconds."""

        if not self.automatic or self.finished or self.screen is not Screen.PLAY:
            return
        self._accum_ms += dt_ms
        while self._accum_ms >= self.interval_ms and not self.finished:
            self._accum_ms -= self.interval_ms
            self.step()

    def elapsed(self) -> str:
        if self.started_at is None:
            return format_elapsed(0)
        end = self.ended_at if self.ended_at is not None else self.clock()
        return format_elapsed(end - self.started_at)


# ----------------------------------------------------------------------
# Drawing
# ----------------------------------------------------------------------
def cell_color(kind: TetrominoType, game_over: bool = False) -> tuple[int, int, int]:
    """Return the fill colour of a board cell; empty cells turn light on game over."""

    if kind is TetrominoType.EMPTY and game_over:
        return BOARD_BACKGROUND_GAME_OVER
    return TETROMINO_COLORS[kind]


def draw_board(surface: pygame.Surface, board: Board, cell_size: int, game_over: bool = False) -> None:
    """Render the locked cells of ``board``."""

    for r, row in enumerate(board.as_kinds()):
        for c, kind in enumerate(row):
            rect = pygame.Rect(c * cell_size, r * cell_size, cell_size, cell_size)
            pygame.draw.rect(surface, cell_color(kind, game_over), rect)
            pygame.draw.rect(surface, BORDER_COLOR, rect, 1)


def draw_preview(surface: pygame.Surface, kind: Optional[TetrominoType], left: int, top: int, cell_size: int) -> None:
    """Render ``kind`` in its spawn rotation at ``(left, top)``."""

    if kind is None:
        return
    matrix = occupancy_matrix(kind, 0)
    size = cell_size // 2
    for r, c in zip(*matrix.nonzero()):
        rect = pygame.Rect(left + int(c) * size, top + int(r) * size, size, size)
        pygame.draw.rect(surface, TETROMINO_COLORS[kind], rect)
        pygame.draw.rect(surface, BORDER_COLOR, rect, 1)


def draw_text(surface: pygame.Surface, font: pygame.font.Font, text: str, left: int, top: int) -> None:
    surface.blit(font.render(text, True, TEXT_COLOR), (left, top))


def draw_session(surface: pygame.Surface, font: pygame.font.Font, session: ViewerSession, cell_size: int) -> None:
    surface.fill(BACKGROUND)
    board_px = session.board.width * cell_size
    if session.screen is Screen.WELCOME:
        draw_text(surface, font, "Tetris AI", cell_size, cell_size * 2)
        draw_text(surface, font, "Press space to start", cell_size, cell_size * 4)
        return

    draw_board(surface, session.board, cell_size, game_over=session.finished)
    side = board_px + cell_size // 2
    draw_text(surface, font, "Next", side, cell_size // 2)
    draw_preview(surface, session.next_kind, side, cell_size * 2, cell_size)
    draw_text(surface, font, f"Pieces: {session.board.pieces_dropped}", side, cell_size * 5)
    draw_text(surface, font, f"Lines: {session.board.lines_cleared}", side, cell_size * 6)
    draw_text(surface, font, f"Time: {session.elapsed()}", side, cell_size * 7)
    mode = "Auto: on (A)" if session.automatic else "Auto: off (A)"
    draw_text(surface, font, mode, side, cell_size * 9)
    if not session.automatic and not session.finished:
        draw_text(surface, font, "Space: next", side, cell_size * 10)
    if session.finished:
        draw_text(surface, font, "Game over", side, cell_size * 12)


# ----------------------------------------------------------------------
# Event loop
# ----------------------------------------------------------------------
def handle_event(event: pygame.event.Event, session: ViewerSession) -> bool:
    """Apply one pygame event; returns ``False`` when the window should close."""

    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYUP:
        if event.key == pygame.K_ESCAPE:
            return False
        if session.screen is Screen.WELCOME:
            if event.key == pygame.K_SPACE:
                session.start()
        elif event.key == pygame.K_a:
            session.toggle_automatic()
        elif event.key == pygame.K_SPACE and not session.automatic:
            session.step()
    elif event.type == pygame.MOUSEBUTTONUP and session.screen is Screen.WELCOME:
        session.start()
    return True


def run(session: ViewerSession, cell_size: int = CELL_SIZE) -> None:
    pygame.init()
    try:
        width = session.board.width * cell_size + cell_size * 6
        height = session.board.height * cell_size
        surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Tetris AI")
        font = pygame.font.Font(None, max(16, cell_size * 3 // 4))
        clock = pygame.time.Clock()

        running = True
        while running:
            dt = clock.tick(FPS)
            for event in pygame.event.get():
                if not handle_event(event, session):
                    running = False
            session.tick(dt)
            draw_session(surface, font, session, cell_size)
            pygame.display.flip()
    finally:
        pygame.quit()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch the Tetris AI play in a window.")
    parser.add_argument("--cell-size", type=int, default=CELL_SIZE, help="Cell size in pixels.")
    parser.add_argument(
        "--interval", type=int, default=DROP_INTERVAL_MS, help="Milliseconds between pieces in automatic mode."
    )
    parser.add_argument("--automatic", action="store_true", help="Start in automatic mode.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for pieces and tie-breaking.")
    parser.add_argument("--depth", type=int, default=1, help="Adversarial plies searched.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO, WARNING).")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    rng = random.Random(args.seed)
    session = ViewerSession(
        engine=SearchEngine(depth=args.depth, rng=rng),
        rng=rng,
        interval_ms=args.interval,
        automatic=args.automatic,
    )
    run(session, cell_size=args.cell_size)


if __name__ == "__main__":
    main()
