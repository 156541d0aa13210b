from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from trivia.main import create_app
from trivia.settings import Settings


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app = create_app(settings=Settings(track_length=3, feedback_delay_seconds=1.0), run_clock=False)
    with TestClient(app) as c:
        yield c


def _correct_index(state: dict) -> int:
    return state["current_question"]["correct_answer_index"]


def test_healthcheck_and_info(client: TestClient) -> None:
    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "trivia-track"


def test_session_missing_before_start(client: TestClient) -> None:
    assert client.get("/session").status_code == 404
    assert client.post("/session/answer", json={"index": 0}).status_code == 404
    assert client.post("/session/restart").status_code == 404
    assert client.post("/session/actions/answer", json={"index": 0}).status_code == 404


def test_start_serves_first_question(client: TestClient) -> None:
    res = client.post("/session", json={"players": 2, "seed": 7})
    assert res.status_code == 201

    data = res.json()
    assert data["phase"] == "awaiting_answer"
    assert data["global_question_cursor"] == 1
    assert data["seed"] == 7
    assert [p["player_id"] for p in data["players"]] == ["p1", "p2"]
    assert [p["display_name"] for p in data["players"]] == ["Player 1", "Player 2"]
    assert len(data["current_question"]["answers"]) >= 2

    assert client.get("/session").json()["session_id"] == data["session_id"]


def test_answer_then_conflict_while_in_feedback(client: TestClient) -> None:
    state = client.post("/session", json={}).json()

    res = client.post("/session/answer", json={"index": _correct_index(state)})
    assert res.status_code == 200
    data = res.json()
    assert data["phase"] == "feedback"
    assert data["players"][0]["score"] == 10
    assert data["last_resolution"]["correct"] is True

    res = client.post("/session/answer", json={"index": 0})
    assert res.status_code == 409
    assert "feedback" in res.json()["detail"]


def test_feedback_timer_and_tick_advance_turn(client: TestClient) -> None:
    state = client.post("/session", json={}).json()
    client.post("/session/answer", json={"index": _correct_index(state)})

    res = client.post("/session/actions/feedback_elapsed", json={})
    assert res.status_code == 200
    assert res.json()["phase"] == "moving"

    client.app.state.session.tick(10.0)

    data = client.get("/session").json()
    assert data["phase"] == "awaiting_answer"
    assert data["players"][0]["waypoint_index"] == 1
    assert data["players"][0]["token_position"] == [1.0, 0.0]
    assert data["global_question_cursor"] == 2


def test_answer_index_out_of_range(client: TestClient) -> None:
    client.post("/session", json={})

    assert client.post("/session/answer", json={"index": 9}).status_code == 422
    assert client.post("/session/actions/answer", json={"index": 9}).status_code == 422
    assert client.post("/session/actions/answer", json={"index": "one"}).status_code == 422
    assert client.get("/session").json()["phase"] == "awaiting_answer"


def test_malformed_question_deck_rejected(client: TestClient) -> None:
    bad = {"text": "Capital of Spain?", "answers": ["Madrid", "Lisbon"], "correct_answer_index": 5}
    res = client.post("/session", json={"questions": [bad]})

    assert res.status_code == 422
    assert "correct_answer_index=5" in res.json()["detail"]
    assert client.get("/session").status_code == 404


def test_explicit_waypoints_and_questions(client: TestClient) -> None:
    questions = [
        {"text": "2+2?", "answers": ["3", "4"], "correct_answer_index": 1},
        {"text": "Largest planet?", "answers": ["Mars", "Jupiter", "Venus"], "correct_answer_index": 1},
    ]
    res = client.post(
        "/session",
        json={"questions": questions, "waypoints": [[0, 0, 0], [1, 2, 2]], "feedback_delay_seconds": 0},
    )
    assert res.status_code == 201

    res = client.post("/session/answer", json={"index": 1})
    assert res.status_code == 200
    data = res.json()
    assert data["phase"] == "moving"

    client.app.state.session.tick(1.0)
    data = client.get("/session").json()
    assert data["phase"] == "complete"
    assert data["winner_id"] == "p1"
    assert data["players"][0]["token_position"] == [1.0, 2.0, 2.0]


def test_restart_resets_scores(client: TestClient) -> None:
    state = client.post("/session", json={}).json()
    client.post("/session/answer", json={"index": _correct_index(state)})

    res = client.post("/session/restart")
    assert res.status_code == 200
    data = res.json()
    assert data["phase"] == "awaiting_answer"
    assert data["global_question_cursor"] == 1
    assert data["generation"] == state["generation"] + 1
    assert data["players"][0]["score"] == 0
    assert data["last_resolution"] is None


def test_unknown_action_rejected(client: TestClient) -> None:
    res = client.post("/session/actions/skip", json={})
    assert res.status_code == 422
    assert "Unknown action" in res.json()["detail"]


def test_generic_start_action(client: TestClient) -> None:
    res = client.post("/session/actions/start", json={"players": 1, "track_length": 4})
    assert res.status_code == 200
    assert res.json()["phase"] == "awaiting_answer"
    assert client.app.state.session.config.track_length == 4


def test_ws_broadcasts_session_events(client: TestClient) -> None:
    with client.websocket_connect("/ws/session") as ws:
        state = client.post("/session", json={}).json()

        msg = ws.receive_json()
        assert msg["type"] == "QUESTION_READY"
        assert msg["generation"] == state["generation"]
        assert msg["player_id"] == "p1"
        assert msg["cursor"] == 0

        client.post("/session/answer", json={"index": _correct_index(state)})
        msg = ws.receive_json()
        assert msg["type"] == "ANSWER_RESOLVED"
        assert msg["correct"] is True
        assert msg["new_score"] == 10
