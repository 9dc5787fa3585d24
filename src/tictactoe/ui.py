"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import ComputerPlayer
from .game import TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and its computer opponent."""

    game: TicTacToeGame
    ai: ComputerPlayer
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on reset; a scheduled computer move from an older generation is dropped
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic Tac Toe", description="Tic-tac-toe against a beatable AI")


AI_MOVE_DELAY: float = 0.5


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=TicTacToeGame(), ai=ComputerPlayer())
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _log_if_concluded(game_id: str, game: TicTacToeGame) -> None:
    if game.finished:
        logger.info("Game %s concluded: %s", game_id, game.outcome.state.value)


def _run_ai_turn(game_id: str, generation: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_MOVE_DELAY))

    with session.lock:
        if session.generation != generation:
            logger.debug("Dropping stale computer move for game %s", game_id)
            return
        try:
            game = session.game
            if game.finished or game.current_player != session.ai.player:
                return
            cell_index, strategy = session.ai.decide(game.snapshot())
            game.play_move(cell_index)
            session.move_log.append(
                {
                    "player": session.ai.player,
                    "cellIndex": cell_index,
                    "strategy": strategy.value,
                }
            )
            logger.info(
                "Game %s: computer played %d (%s)",
                game_id,
                cell_index,
                strategy.value,
            )
            _log_if_concluded(game_id, game)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "cells": [c or "" for c in game.cells],
            "currentPlayer": game.current_player,
            "state": game.outcome.state.value,
            "winner": game.outcome.winner,
            "strikeClass": game.outcome.strike,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with session.lock:
        game = session.game
        if game.finished:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending or game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})
        logger.info("Game %s: %s played %d", game_id, player, cell_index)
        _log_if_concluded(game_id, game)

        should_schedule_ai = not game.finished
        if should_schedule_ai:
            session.ai_pending = True
        generation = session.generation

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, generation)


def _reset_session(game_id: str, session: GameSession) -> None:
    with session.lock:
        session.generation += 1
        session.game.reset()
        session.move_log.clear()
        session.ai_pending = False
    logger.info("Game %s reset", game_id)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _reset_session(game_id, session)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: dark;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem;
        background: #1b1d29;
        color: #f3f4f8;
      }
      main {
        text-align: center;
      }
      h1 {
        letter-spacing: 0.06em;
      }
      .board {
        position: relative;
        display: grid;
        grid-template-columns: repeat(3, 100px);
        grid-template-rows: repeat(3, 100px);
        margin: 1.5rem auto;
        width: 300px;
      }
      .tile {
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 3.5rem;
        color: #ffb347;
        cursor: pointer;
        user-select: none;
      }
      .right-border {
        border-right: 0.2em solid #6b7cff;
      }
      .bottom-border {
        border-bottom: 0.2em solid #6b7cff;
      }
      .tile.x-hover:hover::after {
        content: \"X\";
        opacity: 0.4;
      }
      .tile.o-hover:hover::after {
        content: \"O\";
        opacity: 0.4;
      }
      .strike {
        position: absolute;
        background-color: #ff4f6d;
      }
      .strike-row-1 { width: 100%; height: 4px; top: 15%; }
      .strike-row-2 { width: 100%; height: 4px; top: 48%; }
      .strike-row-3 { width: 100%; height: 4px; top: 83%; }
      .strike-column-1 { height: 100%; width: 4px; left: 15%; }
      .strike-column-2 { height: 100%; width: 4px; left: 48%; }
      .strike-column-3 { height: 100%; width: 4px; left: 83%; }
      .strike-diagonal-1 {
        width: 90%; height: 4px; top: 50%; left: 5%; transform: skewY(45deg);
      }
      .strike-diagonal-2 {
        width: 90%; height: 4px; top: 50%; left: 5%; transform: skewY(-45deg);
      }
      .game-over {
        font-size: 1.6rem;
        min-height: 2rem;
      }
      .reset-button {
        margin-top: 1rem;
        font-size: 1.1rem;
        padding: 0.6rem 1.4rem;
        border-radius: 999px;
        border: none;
        background: #6b7cff;
        color: white;
        cursor: pointer;
      }
      .hidden {
        display: none;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div class=\"board\" id=\"board\"></div>
      <div class=\"game-over\" id=\"game-over\"></div>
      <button class=\"reset-button hidden\" id=\"reset\">Play Again</button>
    </main>
    <script>
      const RESULTS = {
        playerXWins: 'X Wins',
        playerOWins: 'O Wins',
        draw: 'Draw',
      };
      let state = null;
      let pollTimer = null;

      async function request(path, options) {
        const response = await fetch(path, options);
        if (!response.ok) {
          return null;
        }
        return response.json();
      }

      function render() {
        const board = document.getElementById('board');
        board.innerHTML = '';
        const inProgress = state.state === 'inProgress';
        state.cells.forEach((value, index) => {
          const tile = document.createElement('div');
          const classes = ['tile'];
          if (index % 3 !== 2) classes.push('right-border');
          if (index < 6) classes.push('bottom-border');
          if (!value && inProgress && !state.aiPending) {
            classes.push(state.currentPlayer === 'X' ? 'x-hover' : 'o-hover');
          }
          tile.className = classes.join(' ');
          tile.textContent = value;
          tile.addEventListener('click', () => onTileClick(index));
          board.appendChild(tile);
        });
        const strike = document.createElement('div');
        strike.className = state.strikeClass ? `strike ${state.strikeClass}` : '';
        board.appendChild(strike);

        document.getElementById('game-over').textContent = RESULTS[state.state] || '';
        document.getElementById('reset').classList.toggle('hidden', inProgress);
        schedulePoll();
      }

      function schedulePoll() {
        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(refresh, 200);
        }
      }

      async function refresh() {
        const next = await request(`/api/game/${state.id}`);
        if (next) {
          state = next;
          render();
        }
      }

      async function onTileClick(index) {
        if (state.state !== 'inProgress' || state.cells[index] || state.aiPending) {
          return;
        }
        const next = await request(`/api/game/${state.id}/move`, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ cellIndex: index }),
        });
        if (next) {
          state = next;
          render();
        }
      }

      async function onReset() {
        clearTimeout(pollTimer);
        state = await request(`/api/game/${state.id}/reset`, { method: 'POST' });
        render();
      }

      document.getElementById('reset').addEventListener('click', onReset);

      (async () => {
        state = await request('/api/game', { method: 'POST' });
        render();
      })();
    </script>
  </body>
</html>
"""
