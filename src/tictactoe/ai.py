"""Computer opponents for the 3x3 board: random, heuristic and minimax."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol
import math
import random

from .game import AIDifficulty, Board, CellState, GameResult, TOTAL_CELLS, WINNING_LINES


NO_MOVE = -1

SMART_MOVE_CHANCE = 0.7
# Center, corners, edges.
POSITION_PRIORITY = (4, 0, 2, 6, 8, 1, 3, 5, 7)

SCORE_WIN = 10
SCORE_LOSE = -10
SCORE_DRAW = 0


class AIPlayer(Protocol):
    """Anything that picks a cell for ``ai_symbol`` without touching ``board``."""

    @property
    def difficulty(self) -> AIDifficulty: ...

    def get_move(self, board: Optional[Board], ai_symbol: CellState) -> int: ...


def _find_completing_move(board: Board, symbol: CellState) -> int:
    """First empty cell that completes a line holding two ``symbol`` cells."""
    for line in WINNING_LINES:
        trio = [board.get_cell(i) for i in line]
        if trio.count(symbol) == 2 and trio.count(CellState.EMPTY) == 1:
            return line[trio.index(CellState.EMPTY)]
    return NO_MOVE


# ---------- Easy ----------


@dataclass
class EasyAI:
    seed: Optional[int] = None
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    @property
    def difficulty(self) -> AIDifficulty:
        return AIDifficulty.EASY

    def get_move(self, board: Optional[Board], ai_symbol: CellState) -> int:
        if board is None:
            return NO_MOVE
        empty = board.get_empty_cells()
        if not empty:
            return NO_MOVE
        return self._rng.choice(empty)


# ---------- Medium ----------


@dataclass
class MediumAI:
    """Wins or blocks when a line is one move from done, otherwise mostly plays
    by position priority and sometimes picks at random."""

    seed: Optional[int] = None
    smart_move_chance: float = SMART_MOVE_CHANCE
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    @property
    def difficulty(self) -> AIDifficulty:
        return AIDifficulty.MEDIUM

    def get_move(self, board: Optional[Board], ai_symbol: CellState) -> int:
        if board is None:
            return NO_MOVE
        empty = board.get_empty_cells()
        if not empty:
            return NO_MOVE

        win = _find_completing_move(board, ai_symbol)
        if win != NO_MOVE:
            return win
        block = _find_completing_move(board, ai_symbol.opponent())
        if block != NO_MOVE:
            return block

        if self._rng.random() < self.smart_move_chance:
            return self._strategic_move(board)
        return self._rng.choice(empty)

    @staticmethod
    def _strategic_move(board: Board) -> int:
        for index in POSITION_PRIORITY:
            if board.is_cell_empty(index):
                return index
        return NO_MOVE


# ---------- Hard ----------


@dataclass
class HardAI:
    """Full-depth minimax with alpha-beta pruning. Never loses.

    Scores are taken from the AI's point of view and discounted by depth so
    that quicker wins and slower losses are preferred.
    """

    @property
    def difficulty(self) -> AIDifficulty:
        return AIDifficulty.HARD

    def get_move(self, board: Optional[Board], ai_symbol: CellState) -> int:
        if board is None:
            return NO_MOVE
        empty = board.get_empty_cells()
        if not empty:
            return NO_MOVE

        # Opening book: the search would agree, this just skips it.
        if len(empty) == TOTAL_CELLS:
            return 4
        if len(empty) == TOTAL_CELLS - 1:
            return 4 if board.is_cell_empty(4) else 0

        best_score = -math.inf
        best_move = NO_MOVE
        for index in empty:
            child = board.clone()
            child.make_move(index, ai_symbol)
            score = self._minimax(child, ai_symbol, 0, False, -math.inf, math.inf)
            if score > best_score:
                best_score, best_move = score, index
        return best_move

    # ---- core search ----

    def _minimax(
        self,
        board: Board,
        ai_symbol: CellState,
        depth: int,
        maximizing: bool,
        alpha: float,
        beta: float,
    ) -> float:
        result = board.check_win()
        if result is not GameResult.NONE:
            ai_won = (result is GameResult.X_WINS) == (ai_symbol is CellState.X)
            return SCORE_WIN - depth if ai_won else SCORE_LOSE + depth
        if board.is_full():
            return SCORE_DRAW

        mover = ai_symbol if maximizing else ai_symbol.opponent()
        if maximizing:
            value = -math.inf
            for index in board.get_empty_cells():
                child = board.clone()
                child.make_move(index, mover)
                score = self._minimax(child, ai_symbol, depth + 1, False, alpha, beta)
                value = max(value, score)
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
        else:
            value = math.inf
            for index in board.get_empty_cells():
                child = board.clone()
                child.make_move(index, mover)
                score = self._minimax(child, ai_symbol, depth + 1, True, alpha, beta)
                value = min(value, score)
                beta = min(beta, value)
                if beta <= alpha:
                    break
        return value


# ---------- Factory ----------


_DIFFICULTY_NAMES = {
    AIDifficulty.EASY: "Easy",
    AIDifficulty.MEDIUM: "Medium",
    AIDifficulty.HARD: "Hard",
}

_DIFFICULTY_DESCRIPTIONS = {
    AIDifficulty.EASY: "Random moves. Perfect for beginners.",
    AIDifficulty.MEDIUM: "Smart moves with some randomness. A fair challenge.",
    AIDifficulty.HARD: "Unbeatable. Best possible moves every time.",
}


def create_ai(difficulty: AIDifficulty, seed: Optional[int] = None) -> AIPlayer:
    """Build a fresh strategy for ``difficulty``. Hard ignores ``seed``."""
    if difficulty is AIDifficulty.EASY:
        return EasyAI(seed=seed)
    if difficulty is AIDifficulty.MEDIUM:
        return MediumAI(seed=seed)
    if difficulty is AIDifficulty.HARD:
        return HardAI()
    raise ValueError(f"Unknown AI difficulty: {difficulty!r}")


def difficulty_name(difficulty: AIDifficulty) -> str:
    return _DIFFICULTY_NAMES.get(difficulty, "Unknown")


def difficulty_description(difficulty: AIDifficulty) -> str:
    return _DIFFICULTY_DESCRIPTIONS.get(difficulty, "Unknown difficulty level.")
