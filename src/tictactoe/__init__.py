"""Tic-tac-toe package exposing the board rules, AI opponents and match controller."""

from .ai import EasyAI, HardAI, MediumAI, create_ai
from .controller import GameController, GameObserver, GameState
from .game import AIDifficulty, Board, CellState, GameMode, GameResult
from .stats import InMemoryStatistics, MatchOutcome, Statistics
from .ui import app

__all__ = [
    "AIDifficulty",
    "Board",
    "CellState",
    "EasyAI",
    "GameController",
    "GameMode",
    "GameObserver",
    "GameResult",
    "GameState",
    "HardAI",
    "InMemoryStatistics",
    "MatchOutcome",
    "MediumAI",
    "Statistics",
    "app",
    "create_ai",
]
