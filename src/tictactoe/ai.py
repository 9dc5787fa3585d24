"""Beatable computer opponent: a coin flip between a random move and full minimax."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple
import logging
import math
import random

from .game import (
    Cell,
    GameState,
    PLAYER_O,
    PLAYER_X,
    Player,
    empty_cells,
    evaluate,
)

logger = logging.getLogger(__name__)

# Chance of the random branch on each computer turn
RANDOM_MOVE_PROBABILITY = 0.5

_TERMINAL_SCORES = {
    GameState.X_WINS: -1,
    GameState.O_WINS: 1,
    GameState.DRAW: 0,
}


class RandomSource(Protocol):
    """Subset of ``random.Random`` the computer player draws from."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[int]) -> int: ...


class Strategy(str, Enum):
    RANDOM = "random"
    OPTIMAL = "optimal"


def _place(board: Sequence[Cell], cell: int, player: Player) -> Tuple[Cell, ...]:
    child = list(board)
    child[cell] = player
    return tuple(child)


def minimax(board: Sequence[Cell], maximizing: bool) -> int:
    """Game-theoretic value of ``board`` from O's point of view.

    ``maximizing`` is True when O moves next. Returns -1 (X wins), 0 (draw)
    or 1 (O wins) under optimal play from both sides. Every branch works on
    its own copy of the board.
    """
    state = evaluate(board).state
    if state is not GameState.IN_PROGRESS:
        return _TERMINAL_SCORES[state]

    mover = PLAYER_O if maximizing else PLAYER_X
    scores = [
        minimax(_place(board, cell, mover), not maximizing)
        for cell in empty_cells(board)
    ]
    return max(scores) if maximizing else min(scores)


def best_move(board: Sequence[Cell]) -> int:
    """Lowest-index empty cell with the highest minimax value for O."""
    best_score = -math.inf
    move: Optional[int] = None
    for cell in empty_cells(board):
        score = minimax(_place(board, cell, PLAYER_O), False)
        if score > best_score:
            best_score, move = score, cell
    if move is None:
        raise RuntimeError("No valid moves available")
    return move


@dataclass
class ComputerPlayer:
    """The O player.

    ``rng`` is any object with ``random()`` and ``choice()``; tests pass a
    stub to force one branch.
    """

    player: Player = field(default=PLAYER_O, init=False)
    rng: RandomSource = field(default_factory=random.Random, repr=False)

    # ---- public API ----

    def choose_strategy(self) -> Strategy:
        if self.rng.random() < RANDOM_MOVE_PROBABILITY:
            return Strategy.RANDOM
        return Strategy.OPTIMAL

    def select_move(self, board: Sequence[Cell]) -> int:
        return self.decide(board)[0]

    def decide(self, board: Sequence[Cell]) -> Tuple[int, Strategy]:
        """Pick a cell for this player, returning it with the strategy used."""
        self._check_turn(board)
        strategy = self.choose_strategy()
        if strategy is Strategy.RANDOM:
            move = self.random_move(board)
        else:
            move = best_move(board)
        logger.debug("Computer chose cell %d (%s)", move, strategy.value)
        return move, strategy

    def random_move(self, board: Sequence[Cell]) -> int:
        moves: List[int] = empty_cells(board)
        if not moves:
            raise RuntimeError("No valid moves available")
        return self.rng.choice(moves)

    # ---- helpers ----

    def _check_turn(self, board: Sequence[Cell]) -> None:
        x_count = sum(1 for c in board if c == PLAYER_X)
        o_count = sum(1 for c in board if c == PLAYER_O)
        to_move = PLAYER_X if x_count == o_count else PLAYER_O
        if to_move != self.player:
            raise ValueError("It is not this AI player's turn")
