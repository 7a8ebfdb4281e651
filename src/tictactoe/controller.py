"""Match state machine tying the board, the AI and the presentation together."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging
import random

from .ai import AIPlayer, create_ai
from .game import AIDifficulty, Board, CellState, GameMode, GameResult
from .scheduling import AsyncioScheduler, Cancellable, Scheduler
from .stats import MatchOutcome, StatisticsService


logger = logging.getLogger(__name__)

AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.8)


class GameState(str, Enum):
    NONE = "none"
    MAIN_MENU = "main_menu"
    DIFFICULTY_SELECT = "difficulty_select"
    LOBBY = "lobby"
    WAITING_FOR_PLAYER = "waiting_for_player"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    PAUSED = "paused"


class GameObserver:
    """Presentation hooks. Override the ones you care about."""

    def on_match_started(self) -> None:
        pass

    def on_state_changed(self, state: GameState) -> None:
        pass

    def on_turn_changed(self, symbol: CellState) -> None:
        pass

    def on_move_made(self, index: int, symbol: CellState) -> None:
        pass

    def on_game_ended(self, result: GameResult) -> None:
        pass


class GameController:
    """Owns one board and the active AI strategy for the current match.

    Human and AI moves share ``_process_move`` so both go through the same
    validation and result checks. AI moves are deferred through the scheduler
    by a random think-delay; leaving ``PLAYING`` cancels a pending AI move and
    the deferred callback re-checks the match before touching the board.
    """

    def __init__(
        self,
        observers: Iterable[GameObserver] = (),
        statistics: Optional[StatisticsService] = None,
        scheduler: Optional[Scheduler] = None,
        think_delay: Tuple[float, float] = AI_THINK_DELAY,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.board = Board()
        self.mode: Optional[GameMode] = None
        self.difficulty: Optional[AIDifficulty] = None
        self.current_turn = CellState.X
        self.last_result = GameResult.NONE
        self.last_outcome: Optional[MatchOutcome] = None
        self.player_is_x = True

        self._observers: List[GameObserver] = list(observers)
        self._statistics = statistics
        self._scheduler = scheduler or AsyncioScheduler()
        self._think_delay = think_delay
        self._rng = rng or random.Random()

        self._state = GameState.NONE
        self._state_before_pause = GameState.NONE
        self._ai: Optional[AIPlayer] = None
        self._seed: Optional[int] = None
        self._pending_ai: Optional[Cancellable] = None
        # Bumped on every new match so stale callbacks can tell.
        self._match_id = 0

        self._change_state(GameState.MAIN_MENU)

    # ---- observers ----

    def add_observer(self, observer: GameObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: GameObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    # ---- queries ----

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def ai(self) -> Optional[AIPlayer]:
        return self._ai

    @property
    def player_symbol(self) -> CellState:
        return CellState.X if self.player_is_x else CellState.O

    @property
    def ai_symbol(self) -> CellState:
        return self.player_symbol.opponent()

    @property
    def is_ai_thinking(self) -> bool:
        return self._pending_ai is not None

    @property
    def winning_line(self) -> Optional[List[int]]:
        return self.board.get_winning_line()

    def is_ai_turn(self) -> bool:
        if self.mode is not GameMode.VS_AI or self._ai is None:
            return False
        return self.current_turn is self.ai_symbol

    # ---- navigation ----

    def go_to_difficulty_select(self) -> None:
        self._change_state(GameState.DIFFICULTY_SELECT)

    def go_to_lobby(self) -> None:
        self._change_state(GameState.LOBBY)

    def start_vs_ai(
        self,
        difficulty: AIDifficulty,
        player_is_x: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        ai = create_ai(difficulty, seed=seed)
        self.mode = GameMode.VS_AI
        self.difficulty = difficulty
        self.player_is_x = player_is_x
        self._ai = ai
        self._seed = seed
        self._start_match()

    def start_local_multiplayer(self) -> None:
        self.mode = GameMode.LOCAL_MULTIPLAYER
        self.difficulty = None
        self.player_is_x = True
        self._ai = None
        self._start_match()

    def start_network_multiplayer(self, is_host: bool = True) -> None:
        """Stub: waits for an opponent that never arrives."""
        self._cancel_pending_ai()
        self.mode = GameMode.NETWORK_MULTIPLAYER
        self.difficulty = None
        self.player_is_x = is_host
        self._ai = None
        self._match_id += 1
        logger.info("Network multiplayer is not available, waiting for player")
        self._change_state(GameState.WAITING_FOR_PLAYER)

    def restart(self) -> None:
        """Start a fresh match with the same mode, side and strategy."""
        if self.mode is None:
            logger.debug("Restart ignored: no match has been started")
            return
        if self.mode is GameMode.NETWORK_MULTIPLAYER:
            self.start_network_multiplayer(self.player_is_x)
            return
        if self.mode is GameMode.VS_AI and self._ai is None:
            # Quitting drops the strategy; rebuild it for the stored difficulty.
            self._ai = create_ai(self.difficulty, seed=self._seed)
        self._start_match()

    def quit_to_menu(self) -> None:
        self._cancel_pending_ai()
        self._ai = None
        self._match_id += 1
        self._change_state(GameState.MAIN_MENU)

    def pause(self) -> None:
        if self._state is not GameState.PLAYING:
            return
        self._state_before_pause = self._state
        self._change_state(GameState.PAUSED)

    def resume(self) -> None:
        if self._state is not GameState.PAUSED:
            return
        self._change_state(self._state_before_pause)
        if self._state is GameState.PLAYING and self.is_ai_turn():
            self._schedule_ai_turn()

    # ---- moves ----

    def make_move(self, index: int) -> bool:
        """Attempt a human move. Returns False, without side effects, when the
        move is not acceptable right now."""
        if self._state is not GameState.PLAYING:
            logger.debug("Move %s rejected: state is %s", index, self._state.value)
            return False
        if self.is_ai_thinking:
            logger.debug("Move %s rejected: AI is thinking", index)
            return False
        if self.is_ai_turn():
            logger.debug("Move %s rejected: it is the AI's turn", index)
            return False
        if not self._process_move(index):
            logger.debug("Move %s rejected by the board", index)
            return False
        return True

    # ---- internals ----

    def _start_match(self) -> None:
        self._cancel_pending_ai()
        self._match_id += 1
        self.board.reset()
        self.current_turn = CellState.X
        self.last_result = GameResult.NONE
        self.last_outcome = None
        self._notify("on_match_started")
        self._change_state(GameState.PLAYING)
        self._notify("on_turn_changed", self.current_turn)
        if self.is_ai_turn():
            self._schedule_ai_turn()

    def _process_move(self, index: int) -> bool:
        symbol = self.current_turn
        if not self.board.make_move(index, symbol):
            return False
        self._notify("on_move_made", index, symbol)

        result = self.board.get_game_result()
        if result.is_terminal:
            self._end_game(result)
            return True

        self.current_turn = symbol.opponent()
        self._notify("on_turn_changed", self.current_turn)
        if self.is_ai_turn():
            self._schedule_ai_turn()
        return True

    def _schedule_ai_turn(self) -> None:
        if self._ai is None or self._state is not GameState.PLAYING:
            return
        self._cancel_pending_ai()
        low, high = self._think_delay
        delay = self._rng.uniform(low, high)
        match_id = self._match_id
        self._pending_ai = self._scheduler.schedule(
            delay, lambda: self._run_ai_turn(match_id)
        )

    def _run_ai_turn(self, match_id: int) -> None:
        if match_id != self._match_id:
            return
        self._pending_ai = None
        if self._state is not GameState.PLAYING:
            return
        if self._ai is None or not self.is_ai_turn():
            return
        move = self._ai.get_move(self.board, self.ai_symbol)
        if not self._process_move(move):
            logger.warning("AI returned invalid move: %s", move)

    def _cancel_pending_ai(self) -> None:
        if self._pending_ai is not None:
            self._pending_ai.cancel()
            self._pending_ai = None

    def _end_game(self, result: GameResult) -> None:
        self.last_result = result
        self.last_outcome = self._outcome_for(result)
        self._change_state(GameState.GAME_OVER)
        self._record_result(self.last_outcome)
        self._notify("on_game_ended", result)

    def _outcome_for(self, result: GameResult) -> MatchOutcome:
        if result is GameResult.DRAW:
            return MatchOutcome.DRAW
        winner = CellState.X if result is GameResult.X_WINS else CellState.O
        return MatchOutcome.WIN if winner is self.player_symbol else MatchOutcome.LOSS

    def _record_result(self, outcome: MatchOutcome) -> None:
        if self._statistics is None:
            logger.warning("Statistics service not available, result not saved")
            return
        if self.mode is None:
            return
        self._statistics.record_match_result(self.mode, self.difficulty, outcome)
        logger.info(
            "Game result recorded: %s - %s", self.mode.value, self.last_result.value
        )

    def _change_state(self, new_state: GameState) -> None:
        if self._state is new_state:
            return
        old_state = self._state
        if old_state is GameState.PLAYING:
            self._cancel_pending_ai()
        self._state = new_state
        logger.info("State: %s -> %s", old_state.value, new_state.value)
        self._notify("on_state_changed", new_state)

    def _notify(self, hook: str, *args: object) -> None:
        for observer in list(self._observers):
            getattr(observer, hook)(*args)
