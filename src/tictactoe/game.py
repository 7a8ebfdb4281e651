"""Core rules for the 3x3 board: cells, win lines and result classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


BOARD_SIZE = 3
TOTAL_CELLS = BOARD_SIZE * BOARD_SIZE

# Rows, then columns, then diagonals. Scan order matters for tie-breaks.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class CellState(str, Enum):
    EMPTY = " "
    X = "X"
    O = "O"

    def opponent(self) -> "CellState":
        if self is CellState.X:
            return CellState.O
        if self is CellState.O:
            return CellState.X
        return CellState.EMPTY


class GameResult(str, Enum):
    NONE = "none"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self is not GameResult.NONE


class GameMode(str, Enum):
    VS_AI = "vs_ai"
    LOCAL_MULTIPLAYER = "local"
    NETWORK_MULTIPLAYER = "network"


class AIDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def order(self) -> int:
        """Position in the Easy/Medium/Hard ordering (0, 1, 2)."""
        return list(AIDifficulty).index(self)


def _empty_cells() -> List[CellState]:
    return [CellState.EMPTY] * TOTAL_CELLS


# ---------- Board ----------


@dataclass
class Board:
    """Nine cells in row-major order plus a move counter.

    Invalid moves are a normal outcome here: ``make_move`` answers False and
    leaves the board untouched rather than raising.
    """

    cells: List[CellState] = field(default_factory=_empty_cells)
    move_count: int = 0
    _winning_line: Optional[Tuple[int, int, int]] = field(
        default=None, init=False, repr=False, compare=False
    )

    # ---- mutation ----

    def reset(self) -> None:
        for i in range(TOTAL_CELLS):
            self.cells[i] = CellState.EMPTY
        self.move_count = 0
        self._winning_line = None

    def make_move(self, index: int, player: CellState) -> bool:
        if not self.is_valid_move(index, player):
            return False
        self.cells[index] = player
        self.move_count += 1
        self._winning_line = None
        return True

    def is_valid_move(self, index: int, player: CellState) -> bool:
        if not 0 <= index < TOTAL_CELLS:
            return False
        if self.cells[index] is not CellState.EMPTY:
            return False
        return player is not CellState.EMPTY

    # ---- queries ----

    def is_cell_empty(self, index: int) -> bool:
        if not 0 <= index < TOTAL_CELLS:
            return False
        return self.cells[index] is CellState.EMPTY

    def get_cell(self, index: int) -> CellState:
        # Out-of-range reads answer EMPTY instead of raising.
        if not 0 <= index < TOTAL_CELLS:
            return CellState.EMPTY
        return self.cells[index]

    def is_full(self) -> bool:
        return self.move_count >= TOTAL_CELLS

    def symbol_count(self, symbol: CellState) -> int:
        return sum(1 for c in self.cells if c is symbol)

    def get_empty_cells(self) -> List[int]:
        """Indices of empty cells in ascending order."""
        return [i for i, c in enumerate(self.cells) if c is CellState.EMPTY]

    def check_win(self) -> GameResult:
        """Return the winner of the first completed line, caching that line."""
        for line in WINNING_LINES:
            a, b, c = line
            v = self.cells[a]
            if v is not CellState.EMPTY and v == self.cells[b] == self.cells[c]:
                self._winning_line = line
                return GameResult.X_WINS if v is CellState.X else GameResult.O_WINS
        self._winning_line = None
        return GameResult.NONE

    def check_draw(self) -> bool:
        return self.is_full() and self.check_win() is GameResult.NONE

    def get_game_result(self) -> GameResult:
        result = self.check_win()
        if result is not GameResult.NONE:
            return result
        if self.is_full():
            return GameResult.DRAW
        return GameResult.NONE

    def get_winning_line(self) -> Optional[List[int]]:
        if self._winning_line is None:
            self.check_win()
        if self._winning_line is None:
            return None
        return list(self._winning_line)

    def clone(self) -> "Board":
        return Board(cells=self.cells.copy(), move_count=self.move_count)

    # ---- coordinates ----

    @staticmethod
    def index_to_coords(index: int) -> Tuple[int, int]:
        if not 0 <= index < TOTAL_CELLS:
            raise ValueError(f"Cell index out of range: {index}")
        return index // BOARD_SIZE, index % BOARD_SIZE

    @staticmethod
    def coords_to_index(row: int, col: int) -> int:
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise ValueError(f"Coordinates out of range: ({row}, {col})")
        return row * BOARD_SIZE + col

    def __str__(self) -> str:
        rows = []
        for r in range(BOARD_SIZE):
            row = self.cells[r * BOARD_SIZE : (r + 1) * BOARD_SIZE]
            rows.append("|".join(c.value for c in row))
        return "\n".join(rows)
