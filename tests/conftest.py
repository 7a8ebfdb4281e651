"""Shared fixtures: a hand-cranked scheduler and a recording observer."""

from __future__ import annotations

from typing import Callable, List, Tuple

import pytest

from tictactoe.controller import GameController, GameObserver, GameState
from tictactoe.game import Board, CellState, GameResult
from tictactoe.stats import InMemoryStatistics


class ManualHandle:
    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self.callback = callback
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Queues callbacks until the test decides to run them."""

    def __init__(self) -> None:
        self.handles: List[ManualHandle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback, delay)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def run_pending(self) -> int:
        ran = 0
        while self.pending:
            handle = self.pending[0]
            self.handles.remove(handle)
            handle.callback()
            ran += 1
        return ran


class RecordingObserver(GameObserver):
    def __init__(self) -> None:
        self.states: List[GameState] = []
        self.turns: List[CellState] = []
        self.moves: List[Tuple[int, CellState]] = []
        self.results: List[GameResult] = []
        self.matches_started = 0

    def on_match_started(self) -> None:
        self.matches_started += 1

    def on_state_changed(self, state: GameState) -> None:
        self.states.append(state)

    def on_turn_changed(self, symbol: CellState) -> None:
        self.turns.append(symbol)

    def on_move_made(self, index: int, symbol: CellState) -> None:
        self.moves.append((index, symbol))

    def on_game_ended(self, result: GameResult) -> None:
        self.results.append(result)


def board_from(x_cells=(), o_cells=()) -> Board:
    board = Board()
    for i in x_cells:
        board.cells[i] = CellState.X
    for i in o_cells:
        board.cells[i] = CellState.O
    board.move_count = len(x_cells) + len(o_cells)
    return board


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def statistics() -> InMemoryStatistics:
    return InMemoryStatistics()


@pytest.fixture
def controller(scheduler, observer, statistics) -> GameController:
    return GameController(
        observers=[observer],
        statistics=statistics,
        scheduler=scheduler,
        think_delay=(0.3, 0.8),
    )
