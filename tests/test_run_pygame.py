import random

import pygame

from tetris_ai.ai import SearchEngine
from tetris_ai.board import Board
from tetris_ai.run_pygame import (
    BOARD_BACKGROUND_GAME_OVER,
    TETROMINO_COLORS,
    Screen,
    ViewerSession,
    cell_color,
    draw_board,
    handle_event,
)
from tetris_ai.tetromino import TetrominoType


class FakeClock:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def _session(board=None, **kwargs) -> ViewerSession:
    engine = SearchEngine(board, depth=0, rng=random.Random(1))
    return ViewerSession(engine=engine, rng=random.Random(2), **kwargs)


def _blocked_board() -> Board:
    rows = ["I.I.I.I.I.", ".I.I.I.I.I"] + [".........."] * 18
    return Board.from_rows(rows, height=20)


def _key(key: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYUP, key=key)


def test_welcome_screen_waits_for_start():
    session = _session()
    assert session.screen is Screen.WELCOME
    assert not session.step()
    session.tick(10_000)
    assert session.board.pieces_dropped == 0

    session.start()
    assert session.screen is Screen.PLAY
    assert session.engine.pending is not None
    assert session.next_kind is not None


def test_step_drops_pending_and_deals_next_piece():
    session = _session()
    session.start()
    upcoming = session.next_kind
    assert session.step()
    assert session.board.pieces_dropped == 1
    assert session.engine.pending is upcoming


def test_tick_only_steps_in_automatic_mode():
    session = _session(interval_ms=500)
    session.start()
    session.tick(1200)
    assert session.board.pieces_dropped == 0

    session.toggle_automatic()
    session.tick(1200)
    assert session.board.pieces_dropped == 2
    session.tick(300)
    assert session.board.pieces_dropped == 3


def test_session_finishes_when_no_move_is_left():
    clock = FakeClock()
    session = _session(_blocked_board(), clock=clock, automatic=True)
    session.start()
    clock.advance(65)
    session.tick(500)

    assert session.finished
    assert session.board.pieces_dropped == 0
    assert not session.step()
    clock.advance(30)
    assert session.elapsed() == "01:05"


def test_elapsed_runs_while_playing():
    clock = FakeClock()
    session = _session(clock=clock)
    assert session.elapsed() == "00:00"
    clock.advance(10)
    session.start()
    clock.advance(125)
    assert session.elapsed() == "02:05"


def test_handle_event_controls_session():
    session = _session()
    assert handle_event(_key(pygame.K_a), session)
    assert not session.automatic  # ignored on the welcome screen

    assert handle_event(_key(pygame.K_SPACE), session)
    assert session.screen is Screen.PLAY

    assert handle_event(_key(pygame.K_SPACE), session)
    assert session.board.pieces_dropped == 1

    assert handle_event(_key(pygame.K_a), session)
    assert session.automatic
    assert handle_event(_key(pygame.K_SPACE), session)
    assert session.board.pieces_dropped == 1

    assert not handle_event(_key(pygame.K_ESCAPE), session)
    assert not handle_event(pygame.event.Event(pygame.QUIT), session)


def test_mouse_click_starts_game():
    session = _session()
    handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(0, 0)), session)
    assert session.screen is Screen.PLAY


def test_empty_cells_turn_light_on_game_over():
    assert cell_color(TetrominoType.EMPTY) == TETROMINO_COLORS[TetrominoType.EMPTY]
    assert cell_color(TetrominoType.EMPTY, game_over=True) == BOARD_BACKGROUND_GAME_OVER
    assert cell_color(TetrominoType.I, game_over=True) == TETROMINO_COLORS[TetrominoType.I]


def test_draw_board_fills_cells():
    board = Board.from_rows(["I..."], height=4)
    surface = pygame.Surface((40, 40))
    draw_board(surface, board, 10)
    assert tuple(surface.get_at((5, 35)))[:3] == TETROMINO_COLORS[TetrominoType.I]
    assert tuple(surface.get_at((15, 35)))[:3] == TETROMINO_COLORS[TetrominoType.EMPTY]

    draw_board(surface, board, 10, game_over=True)
    assert tuple(surface.get_at((15, 35)))[:3] == BOARD_BACKGROUND_GAME_OVER
