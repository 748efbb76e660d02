"""Tests for API endpoints."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import app, run
from api.session import get_session_store
from config import config


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _new_game(client) -> str:
    response = await client.post("/api/game/new")
    return response.json()["session_id"]


def _card_text(card: dict) -> str:
    return f"{card['rank']}{card['suit']}"


def _move(stack: dict, prediction: str) -> dict:
    return {
        "row": stack["row"],
        "column": stack["column"],
        "prediction": prediction,
        "reference_card": _card_text(stack["top_card"]),
    }


async def _fail_stack(client, session_id: str, stack: dict) -> dict:
    """Commit a guess that is known to be wrong."""
    headers = {"X-Session-ID": session_id}
    peek = await client.post("/api/game/peek", json=_move(stack, "higher"), headers=headers)
    wrong = "lower" if peek.json()["would_be_correct"] else "higher"
    response = await client.post("/api/game/move", json=_move(stack, wrong), headers=headers)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_new_game(client):
    """Test creating a new game."""
    response = await client.post("/api/game/new")
    assert response.status_code == 200
    assert "session_id" in response.json()


@pytest.mark.asyncio
async def test_new_game_reuses_session(client):
    """Test that a new game on an existing session keeps the token."""
    session_id = await _new_game(client)
    response = await client.post("/api/game/new", headers={"X-Session-ID": session_id})
    assert response.json()["session_id"] == session_id


@pytest.mark.asyncio
async def test_game_state(client):
    """Test getting game state."""
    session_id = await _new_game(client)

    response = await client.get("/api/game/state", headers={"X-Session-ID": session_id})
    assert response.status_code == 200
    data = response.json()

    assert data["state"] == "ACTIVE"
    assert data["cards_remaining"] == 43
    assert len(data["stacks"]) == 9
    assert all(s["status"] == "active" and s["size"] == 1 for s in data["stacks"])
    assert len(data["seen_cards"]) == 9
    assert data["won"] is False
    assert data["lost"] is False


@pytest.mark.asyncio
async def test_unknown_session(client):
    """Test that an unsigned or unknown session is rejected."""
    response = await client.get("/api/game/state", headers={"X-Session-ID": "not-a-session"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_peek_then_commit(client):
    """Test that committing draws exactly the card the peek showed."""
    session_id = await _new_game(client)
    headers = {"X-Session-ID": session_id}
    state = (await client.get("/api/game/state", headers=headers)).json()
    stack = state["stacks"][0]

    peek_one = await client.post("/api/game/peek", json=_move(stack, "higher"), headers=headers)
    peek_two = await client.post("/api/game/peek", json=_move(stack, "higher"), headers=headers)
    assert peek_one.status_code == 200
    assert peek_one.json() == peek_two.json()

    response = await client.post("/api/game/move", json=_move(stack, "higher"), headers=headers)
    assert response.status_code == 200
    data = response.json()

    assert data["drawn_card"] == peek_one.json()["drawn_card"]
    assert data["was_correct"] == peek_one.json()["would_be_correct"]
    assert data["game"]["cards_remaining"] == 42
    assert data["game"]["stacks"][0]["size"] == 2


@pytest.mark.asyncio
async def test_move_on_failed_stack(client):
    """Test that a failed stack cannot be played."""
    session_id = await _new_game(client)
    headers = {"X-Session-ID": session_id}
    state = (await client.get("/api/game/state", headers=headers)).json()

    result = await _fail_stack(client, session_id, state["stacks"][4])
    failed = result["game"]["stacks"][4]
    assert failed["status"] == "failed"

    response = await client.post("/api/game/move", json=_move(failed, "higher"), headers=headers)
    assert response.status_code == 400

    response = await client.get(
        "/api/game/probabilities", params={"row": 2, "column": 2}, headers=headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_move_request(client):
    """Test request validation."""
    session_id = await _new_game(client)
    headers = {"X-Session-ID": session_id}

    response = await client.post(
        "/api/game/move",
        json={"row": 4, "column": 1, "prediction": "higher", "reference_card": "AS"},
        headers=headers,
    )
    assert response.status_code == 422

    response = await client.post(
        "/api/game/move",
        json={"row": 1, "column": 1, "prediction": "higher", "reference_card": "ZZ"},
        headers=headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_probabilities(client):
    """Test the odds for a fresh stack."""
    session_id = await _new_game(client)
    headers = {"X-Session-ID": session_id}

    response = await client.get(
        "/api/game/probabilities", params={"row": 1, "column": 3}, headers=headers
    )
    assert response.status_code == 200
    data = response.json()

    assert data["total"] == 43
    assert data["higher"] + data["lower"] + data["same"] == pytest.approx(1.0)
    assert data["higher_display"].endswith("%")
    assert set(data["confidence"]) == {"higher", "lower", "same"}


@pytest.mark.asyncio
async def test_card_counts(client):
    """Test per-rank counts."""
    session_id = await _new_game(client)

    response = await client.get("/api/game/counts", headers={"X-Session-ID": session_id})
    assert response.status_code == 200
    data = response.json()

    assert len(data) == 13
    assert data[0]["rank"] == "2"
    assert data[-1]["rank"] == "A"
    assert sum(c["seen"] for c in data) == 9


@pytest.mark.asyncio
async def test_abandoned_sessions_are_evicted(client):
    """Test that new games clear out sessions whose TTL has passed."""
    store = get_session_store()
    for _ in range(50):
        await _new_game(client)
    for session in store._sessions.values():
        session.expires_at = datetime.now() - timedelta(seconds=1)

    for _ in range(5):
        await _new_game(client)

    assert len(store) == 5


def test_run_serves_on_configured_address():
    """Test the server entry point uses the configured host and port."""
    with patch("uvicorn.run") as uvicorn_run:
        run()

    uvicorn_run.assert_called_once_with(
        "api.main:app", host=config.host, port=config.port, reload=config.debug
    )
