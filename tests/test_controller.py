"""Tests for the match state machine."""

import logging
import random

import pytest

from tictactoe.controller import GameController, GameState
from tictactoe.game import AIDifficulty, CellState, GameMode, GameResult
from tictactoe.stats import MatchOutcome


class ScriptedAI:
    """Plays a fixed list of cells, in order."""

    difficulty = AIDifficulty.HARD

    def __init__(self, moves):
        self.moves = list(moves)
        self.calls = 0

    def get_move(self, board, ai_symbol):
        self.calls += 1
        return self.moves.pop(0)


def test_starts_in_main_menu(controller, observer):
    assert controller.state is GameState.MAIN_MENU
    assert observer.states == [GameState.MAIN_MENU]


def test_navigation_states(controller):
    controller.go_to_difficulty_select()
    assert controller.state is GameState.DIFFICULTY_SELECT
    controller.go_to_lobby()
    assert controller.state is GameState.LOBBY


def test_moves_rejected_outside_playing(controller):
    assert controller.make_move(4) is False
    assert controller.board.move_count == 0


def test_local_multiplayer_alternates_turns(controller, observer):
    controller.start_local_multiplayer()
    assert controller.state is GameState.PLAYING
    assert controller.make_move(0)
    assert controller.make_move(4)
    assert controller.board.get_cell(0) is CellState.X
    assert controller.board.get_cell(4) is CellState.O
    assert observer.moves == [(0, CellState.X), (4, CellState.O)]
    assert observer.turns == [CellState.X, CellState.O, CellState.X]


def test_occupied_cell_is_rejected_without_turn_change(controller):
    controller.start_local_multiplayer()
    controller.make_move(0)
    before = controller.board.clone()
    assert controller.make_move(0) is False
    assert controller.make_move(12) is False
    assert controller.board == before
    assert controller.current_turn is CellState.O


def test_local_win_scenario(controller, observer, statistics):
    controller.start_local_multiplayer()
    for index in (0, 4, 1, 7, 2):
        assert controller.make_move(index)

    assert controller.state is GameState.GAME_OVER
    assert controller.last_result is GameResult.X_WINS
    assert controller.last_outcome is MatchOutcome.WIN
    assert controller.winning_line == [0, 1, 2]
    assert observer.results == [GameResult.X_WINS]
    assert controller.make_move(5) is False

    stats = statistics.read_statistics()
    assert stats.total_games == 1
    assert stats.wins_local_multiplayer == 1


def test_local_draw_is_recorded_once(controller, statistics):
    controller.start_local_multiplayer()
    # X O X / X O O / O X X
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        assert controller.make_move(index)
    assert controller.last_result is GameResult.DRAW
    assert controller.winning_line is None

    controller.make_move(0)
    controller.pause()
    stats = statistics.read_statistics()
    assert stats.total_games == 1
    assert stats.draws == 1


def test_vs_ai_schedules_think_delay(controller, scheduler):
    controller.start_vs_ai(AIDifficulty.HARD)
    assert controller.make_move(0)

    assert controller.is_ai_thinking
    assert len(scheduler.pending) == 1
    assert 0.3 <= scheduler.pending[0].delay <= 0.8
    assert controller.make_move(1) is False

    scheduler.run_pending()
    assert not controller.is_ai_thinking
    assert controller.board.get_cell(4) is CellState.O
    assert controller.current_turn is CellState.X
    assert controller.board.move_count == 2


def test_ai_moves_first_when_player_is_o(controller, scheduler, observer):
    controller.start_vs_ai(AIDifficulty.HARD, player_is_x=False)
    assert controller.ai_symbol is CellState.X
    assert controller.is_ai_turn()
    assert controller.make_move(0) is False

    scheduler.run_pending()
    assert controller.board.get_cell(4) is CellState.X
    assert controller.current_turn is CellState.O
    assert controller.make_move(0)


def test_player_loss_against_ai_is_recorded(controller, scheduler, statistics):
    controller.start_vs_ai(AIDifficulty.HARD)
    # Always taking the lowest free cell: X 0, O 4, X 1, O 2, X 3, O 6 wins.
    while controller.state is GameState.PLAYING:
        assert controller.make_move(controller.board.get_empty_cells()[0])
        scheduler.run_pending()

    assert controller.state is GameState.GAME_OVER
    assert controller.last_result is GameResult.O_WINS
    assert controller.last_outcome is MatchOutcome.LOSS
    stats = statistics.read_statistics()
    assert stats.total_games == 1
    assert stats.losses_vs_ai == [0, 0, 1]


def test_hard_ai_never_loses_through_controller(controller, scheduler):
    for seed in range(10):
        controller.start_vs_ai(AIDifficulty.HARD)
        rng = random.Random(seed)
        while controller.state is GameState.PLAYING:
            controller.make_move(rng.choice(controller.board.get_empty_cells()))
            scheduler.run_pending()
        assert controller.last_result is not GameResult.X_WINS


def test_pause_cancels_pending_ai_and_resume_reschedules(controller, scheduler):
    controller.start_vs_ai(AIDifficulty.HARD)
    controller.make_move(0)
    handle = scheduler.pending[0]

    controller.pause()
    assert controller.state is GameState.PAUSED
    assert handle.cancelled
    assert not controller.is_ai_thinking
    assert controller.make_move(1) is False

    controller.resume()
    assert controller.state is GameState.PLAYING
    assert controller.is_ai_thinking
    scheduler.run_pending()
    assert controller.board.move_count == 2


def test_pause_only_from_playing(controller):
    controller.pause()
    assert controller.state is GameState.MAIN_MENU
    controller.resume()
    assert controller.state is GameState.MAIN_MENU


def test_quit_cancels_pending_ai(controller, scheduler):
    controller.start_vs_ai(AIDifficulty.EASY, seed=1)
    controller.make_move(0)
    handle = scheduler.pending[0]

    controller.quit_to_menu()
    assert handle.cancelled
    assert controller.state is GameState.MAIN_MENU
    assert controller.ai is None
    assert controller.board.move_count == 1


def test_stale_callback_does_not_touch_new_match(controller, scheduler):
    controller.start_vs_ai(AIDifficulty.HARD)
    controller.make_move(0)
    stale = scheduler.handles[0]

    controller.restart()
    assert stale.cancelled
    assert controller.board.move_count == 0

    # Fire it anyway: the match id check must keep the board clean.
    stale.callback()
    assert controller.board.move_count == 0
    assert controller.current_turn is CellState.X


def test_restart_after_game_over(controller, statistics, observer):
    controller.start_local_multiplayer()
    for index in (0, 3, 1, 4, 2):
        controller.make_move(index)
    assert controller.state is GameState.GAME_OVER

    controller.restart()
    assert controller.state is GameState.PLAYING
    assert controller.board.move_count == 0
    assert controller.last_result is GameResult.NONE
    assert controller.winning_line is None
    assert statistics.read_statistics().total_games == 1
    assert observer.states[-2:] == [GameState.GAME_OVER, GameState.PLAYING]


def test_restart_keeps_mode_and_difficulty(controller):
    controller.start_vs_ai(AIDifficulty.MEDIUM, player_is_x=False, seed=5)
    ai = controller.ai
    controller.restart()
    assert controller.mode is GameMode.VS_AI
    assert controller.difficulty is AIDifficulty.MEDIUM
    assert controller.player_is_x is False
    assert controller.ai is ai


def test_restart_after_quit_rebuilds_ai(controller, scheduler, statistics):
    controller.start_vs_ai(AIDifficulty.HARD)
    controller.quit_to_menu()
    assert controller.ai is None

    controller.restart()
    assert controller.state is GameState.PLAYING
    assert controller.ai is not None
    assert controller.ai.difficulty is AIDifficulty.HARD

    assert controller.make_move(0)
    assert controller.make_move(1) is False
    scheduler.run_pending()
    assert controller.board.get_cell(4) is CellState.O

    while controller.state is GameState.PLAYING:
        assert controller.make_move(controller.board.get_empty_cells()[0])
        scheduler.run_pending()

    assert controller.last_result is GameResult.O_WINS
    stats = statistics.read_statistics()
    assert stats.wins_vs_ai == [0, 0, 0]
    assert stats.losses_vs_ai == [0, 0, 1]


def test_restart_during_play_signals_new_match(controller, observer):
    controller.start_local_multiplayer()
    controller.make_move(0)
    controller.restart()

    assert observer.matches_started == 2
    assert observer.states == [GameState.MAIN_MENU, GameState.PLAYING]
    assert controller.board.move_count == 0


def test_no_result_recorded_without_a_mode(controller, statistics):
    controller._record_result(MatchOutcome.WIN)
    assert statistics.read_statistics().total_games == 0


def test_new_difficulty_replaces_strategy(controller):
    controller.start_vs_ai(AIDifficulty.EASY)
    easy = controller.ai
    controller.start_vs_ai(AIDifficulty.HARD)
    assert controller.ai is not easy
    assert controller.ai.difficulty is AIDifficulty.HARD


def test_unknown_difficulty_is_an_error(controller):
    with pytest.raises(ValueError):
        controller.start_vs_ai("impossible")
    assert controller.state is GameState.MAIN_MENU


def test_network_stub_waits_for_player(controller):
    controller.start_network_multiplayer(is_host=False)
    assert controller.state is GameState.WAITING_FOR_PLAYER
    assert controller.mode is GameMode.NETWORK_MULTIPLAYER
    assert controller.player_symbol is CellState.O
    assert controller.make_move(0) is False


def test_illegal_ai_move_is_logged_not_applied(controller, scheduler, caplog):
    controller.start_vs_ai(AIDifficulty.HARD)
    controller.make_move(0)
    controller._ai = ScriptedAI([0])

    with caplog.at_level(logging.WARNING, logger="tictactoe.controller"):
        scheduler.run_pending()

    assert "invalid move" in caplog.text
    assert controller.board.move_count == 1
    assert controller.current_turn is CellState.O
    assert controller.state is GameState.PLAYING


def test_missing_statistics_only_warns(scheduler, caplog):
    controller = GameController(scheduler=scheduler)
    controller.start_local_multiplayer()
    with caplog.at_level(logging.WARNING, logger="tictactoe.controller"):
        for index in (0, 3, 1, 4, 2):
            controller.make_move(index)
    assert controller.state is GameState.GAME_OVER
    assert "not saved" in caplog.text


def test_remove_observer(controller, observer):
    controller.remove_observer(observer)
    controller.start_local_multiplayer()
    assert observer.states == [GameState.MAIN_MENU]
