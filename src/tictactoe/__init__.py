"""Tic-tac-toe package exposing game rules, the computer player, and the web application."""

from .ai import ComputerPlayer, Strategy, minimax
from .game import GameState, Outcome, TicTacToeGame, evaluate
from .ui import app

__all__ = [
    "ComputerPlayer",
    "GameState",
    "Outcome",
    "Strategy",
    "TicTacToeGame",
    "app",
    "evaluate",
    "minimax",
]
