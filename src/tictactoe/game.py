"""Core rules, outcome evaluation and game state for tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Cell = Optional[Player]  # None for empty

PLAYER_X: Player = "X"
PLAYER_O: Player = "O"


@dataclass(frozen=True)
class WinningLine:
    cells: Tuple[int, int, int]
    # CSS class the page uses to draw the strike through this line
    strike: str


WINNING_LINES: Tuple[WinningLine, ...] = (
    WinningLine((0, 1, 2), "strike-row-1"),
    WinningLine((3, 4, 5), "strike-row-2"),
    WinningLine((6, 7, 8), "strike-row-3"),
    WinningLine((0, 3, 6), "strike-column-1"),
    WinningLine((1, 4, 7), "strike-column-2"),
    WinningLine((2, 5, 8), "strike-column-3"),
    WinningLine((0, 4, 8), "strike-diagonal-1"),
    WinningLine((2, 4, 6), "strike-diagonal-2"),
)


class GameState(str, Enum):
    IN_PROGRESS = "inProgress"
    X_WINS = "playerXWins"
    O_WINS = "playerOWins"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    state: GameState
    line: Optional[WinningLine] = None

    @property
    def concluded(self) -> bool:
        return self.state is not GameState.IN_PROGRESS

    @property
    def winner(self) -> Optional[Player]:
        if self.state is GameState.X_WINS:
            return PLAYER_X
        if self.state is GameState.O_WINS:
            return PLAYER_O
        return None

    @property
    def strike(self) -> Optional[str]:
        return self.line.strike if self.line else None


IN_PROGRESS = Outcome(GameState.IN_PROGRESS)
DRAW = Outcome(GameState.DRAW)


def other(player: Player) -> Player:
    return PLAYER_O if player == PLAYER_X else PLAYER_X


def empty_cells(board: Sequence[Cell]) -> List[int]:
    return [i for i, c in enumerate(board) if c is None]


def evaluate(board: Sequence[Cell]) -> Outcome:
    """Classify ``board`` as a win (with its line), a draw or still in progress.

    Lines are scanned in the fixed order of ``WINNING_LINES`` and the first
    completed one wins.
    """
    for line in WINNING_LINES:
        a, b, c = line.cells
        v = board[a]
        if v is not None and v == board[b] == board[c]:
            state = GameState.X_WINS if v == PLAYER_X else GameState.O_WINS
            return Outcome(state, line)
    if all(c is not None for c in board):
        return DRAW
    return IN_PROGRESS


# ---------- Game ----------


def _empty_board() -> List[Cell]:
    return [None] * 9


@dataclass
class TicTacToeGame:
    cells: List[Cell] = field(default_factory=_empty_board)
    current_player: Player = PLAYER_X
    outcome: Outcome = IN_PROGRESS

    # ---- API used by UI & AI ----

    @property
    def finished(self) -> bool:
        return self.outcome.concluded

    def available_moves(self) -> List[int]:
        if self.finished:
            return []
        return empty_cells(self.cells)

    def play_move(self, cell: int) -> Outcome:
        """Place the current player's mark, re-evaluate and pass the turn."""
        if self.finished:
            raise ValueError("Game already finished")
        if not 0 <= cell < 9:
            raise ValueError(f"Cell index {cell} is out of range")
        if self.cells[cell] is not None:
            raise ValueError("Cell already occupied")

        self.cells[cell] = self.current_player
        self.outcome = evaluate(self.cells)
        self.current_player = other(self.current_player)
        return self.outcome

    def reset(self) -> None:
        self.cells = _empty_board()
        self.current_player = PLAYER_X
        self.outcome = IN_PROGRESS

    def snapshot(self) -> Tuple[Cell, ...]:
        return tuple(self.cells)
