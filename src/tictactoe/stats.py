"""Match statistics: the persistence collaborator the controller reports to."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Protocol
import logging

from pydantic import BaseModel, ConfigDict, Field

from .game import AIDifficulty, GameMode


logger = logging.getLogger(__name__)

AI_DIFFICULTY_COUNT = len(AIDifficulty)


class MatchOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class StatisticsService(Protocol):
    def record_match_result(
        self,
        mode: GameMode,
        difficulty: Optional[AIDifficulty],
        outcome: MatchOutcome,
    ) -> None: ...

    def read_statistics(self) -> "Statistics": ...


def _per_difficulty() -> List[int]:
    return [0] * AI_DIFFICULTY_COUNT


class Statistics(BaseModel):
    """Outcome tallies. Per-difficulty lists are indexed Easy, Medium, Hard."""

    model_config = ConfigDict(populate_by_name=True)

    total_games: int = Field(default=0, alias="totalGames")
    wins_vs_ai: List[int] = Field(default_factory=_per_difficulty, alias="winsVsAI")
    losses_vs_ai: List[int] = Field(
        default_factory=_per_difficulty, alias="lossesVsAI"
    )
    draws_vs_ai: List[int] = Field(default_factory=_per_difficulty, alias="drawsVsAI")
    wins_local_multiplayer: int = Field(default=0, alias="winsLocalMultiplayer")
    wins_network_multiplayer: int = Field(default=0, alias="winsNetworkMultiplayer")
    losses: int = 0
    draws: int = 0
    current_win_streak: int = Field(default=0, alias="currentWinStreak")
    best_win_streak: int = Field(default=0, alias="bestWinStreak")

    @property
    def total_wins(self) -> int:
        return (
            sum(self.wins_vs_ai)
            + self.wins_local_multiplayer
            + self.wins_network_multiplayer
        )

    @property
    def total_losses(self) -> int:
        return sum(self.losses_vs_ai) + self.losses

    @property
    def total_draws(self) -> int:
        return sum(self.draws_vs_ai) + self.draws

    @property
    def win_rate(self) -> float:
        """Percentage of games won, 0 when nothing has been played."""
        if self.total_games == 0:
            return 0.0
        return self.total_wins / self.total_games * 100.0

    def summary(self) -> dict:
        data = self.model_dump(by_alias=True)
        data.update(
            {
                "totalWins": self.total_wins,
                "totalLosses": self.total_losses,
                "totalDraws": self.total_draws,
                "winRate": self.win_rate,
            }
        )
        return data

    # ---- recording ----

    def _extend_streak(self) -> None:
        self.current_win_streak += 1
        if self.current_win_streak > self.best_win_streak:
            self.best_win_streak = self.current_win_streak

    def record_ai_game(self, difficulty: AIDifficulty, outcome: MatchOutcome) -> None:
        i = difficulty.order
        self.total_games += 1
        if outcome is MatchOutcome.WIN:
            self.wins_vs_ai[i] += 1
            self._extend_streak()
        elif outcome is MatchOutcome.DRAW:
            # A draw keeps the streak alive.
            self.draws_vs_ai[i] += 1
        else:
            self.losses_vs_ai[i] += 1
            self.current_win_streak = 0

    def record_local_game(self, outcome: MatchOutcome) -> None:
        # Only X's wins are tallied; O's wins count toward total games only.
        self.total_games += 1
        if outcome is MatchOutcome.DRAW:
            self.draws += 1
        elif outcome is MatchOutcome.WIN:
            self.wins_local_multiplayer += 1

    def record_network_game(self, outcome: MatchOutcome) -> None:
        self.total_games += 1
        if outcome is MatchOutcome.WIN:
            self.wins_network_multiplayer += 1
            self._extend_streak()
        elif outcome is MatchOutcome.DRAW:
            self.draws += 1
        else:
            self.losses += 1
            self.current_win_streak = 0


class InMemoryStatistics:
    """Process-local statistics store."""

    def __init__(self) -> None:
        self._stats = Statistics()

    def record_match_result(
        self,
        mode: GameMode,
        difficulty: Optional[AIDifficulty],
        outcome: MatchOutcome,
    ) -> None:
        if mode is GameMode.VS_AI:
            if difficulty is None:
                raise ValueError("VsAI results need a difficulty")
            self._stats.record_ai_game(difficulty, outcome)
        elif mode is GameMode.LOCAL_MULTIPLAYER:
            self._stats.record_local_game(outcome)
        elif mode is GameMode.NETWORK_MULTIPLAYER:
            self._stats.record_network_game(outcome)
        else:
            raise ValueError(f"Unknown game mode: {mode!r}")
        logger.info("Recorded %s result: %s", mode.value, outcome.value)

    def read_statistics(self) -> Statistics:
        return self._stats.model_copy(deep=True)

    def reset(self) -> None:
        self._stats = Statistics()
