"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import FakeRandom
from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_MOVE_DELAY = 0.0


def _new_game(roll: float | None = None) -> str:
    response = client.post("/api/game")
    assert response.status_code == 200
    game_id = response.json()["id"]
    if roll is not None:
        ui.SESSIONS[game_id].ai.rng = FakeRandom(roll)
    return game_id


def _move(game_id: str, cell: int):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell})


def test_create_game_and_first_move():
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["cells"] == [""] * 9
    assert payload["state"] == "inProgress"
    assert payload["strikeClass"] is None
    assert payload["moveLog"] == []

    game_id = payload["id"]
    move_response = _move(game_id, 4)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["moveLog"][0] == {"player": "X", "cellIndex": 4}
    assert state["cells"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    last = final_state["lastMove"]
    assert last["player"] == "O"
    assert last["strategy"] in ("random", "optimal")
    assert final_state["cells"][last["cellIndex"]] == "O"


def test_optimal_computer_blocks():
    game_id = _new_game(roll=0.99)
    _move(game_id, 0)
    # Corner opening: the only non-losing reply is the centre
    state = client.get(f"/api/game/{game_id}").json()
    assert state["lastMove"] == {"player": "O", "cellIndex": 4, "strategy": "optimal"}


def test_game_over_and_reset():
    # Random branch always takes the lowest empty cell: O plays 1, then 2
    game_id = _new_game(roll=0.0)
    for cell in (0, 3, 6):
        assert _move(game_id, cell).status_code == 200

    state = client.get(f"/api/game/{game_id}").json()
    assert state["state"] == "playerXWins"
    assert state["winner"] == "X"
    assert state["strikeClass"] == "strike-column-1"
    assert state["availableMoves"] == []
    assert state["aiPending"] is False

    rejected = _move(game_id, 8)
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Game already finished"

    reset = client.post(f"/api/game/{game_id}/reset")
    assert reset.status_code == 200
    fresh = reset.json()
    assert fresh["cells"] == [""] * 9
    assert fresh["currentPlayer"] == "X"
    assert fresh["state"] == "inProgress"
    assert fresh["strikeClass"] is None
    assert fresh["moveLog"] == []


def test_invalid_move_rejected():
    game_id = _new_game()
    assert _move(game_id, 0).status_code == 200

    duplicate_move = _move(game_id, 0)
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_rejects_out_of_range_cell():
    game_id = _new_game()
    assert _move(game_id, 9).status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert client.post("/api/game/missing/reset").status_code == 404


def test_move_rejected_while_computer_pending():
    game_id = _new_game()
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 0)
    assert session.ai_pending is True

    blocked = _move(game_id, 1)
    assert blocked.status_code == 400
    assert blocked.json()["detail"] == "AI is completing its move"


def test_reset_discards_pending_computer_move():
    game_id = _new_game(roll=0.0)
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 0)
    stale_generation = session.generation

    client.post(f"/api/game/{game_id}/reset")
    ui._run_ai_turn(game_id, stale_generation)

    assert session.game.cells == [None] * 9
    assert session.game.current_player == "X"
    assert session.move_log == []


def test_scheduled_computer_move_runs_for_current_generation():
    game_id = _new_game(roll=0.0)
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 0)

    ui._run_ai_turn(game_id, session.generation)

    assert session.game.cells[1] == "O"
    assert session.ai_pending is False


def test_index_serves_board_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text
    assert "strike-diagonal-2" in response.text
