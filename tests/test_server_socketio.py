import asyncio
import random

import pytest

from roshambo.server import main
from roshambo.server.orchestrator import orchestrator
from roshambo.server.services.opponent_registry import OpponentRegistry
from roshambo.server.session import SessionStore


@pytest.fixture
def emitted(monkeypatch):
    """Record sio.emit calls instead of sending them."""
    calls = []

    async def fake_emit(event, data=None, to=None, room=None, **kwargs):
        calls.append({"event": event, "data": data, "to": to, "room": room})

    monkeypatch.setattr(main.sio, "emit", fake_emit)
    monkeypatch.setattr(orchestrator, "store", SessionStore())
    monkeypatch.setattr(orchestrator, "registry", OpponentRegistry())
    monkeypatch.setattr(orchestrator, "rng", random.Random(0))
    orchestrator.registry.seed_defaults()
    return calls


def _terminator_id():
    return next(p.id for p in orchestrator.registry.list_opponents() if p.name == "terminator")


def test_play_round_broadcasts_to_game_room(emitted):
    async def _run():
        session = await orchestrator.create_session(_terminator_id(), total_rounds=3)
        await main.play_round("sid-1", {"game_id": session.id, "move": "rock", "locale": "en"})
        return session

    session = asyncio.run(_run())

    assert len(emitted) == 1
    call = emitted[0]
    assert call["event"] == "round_result"
    assert call["room"] == f"game_{session.id}"
    assert call["data"]["event"] == "round_result"
    assert call["data"]["data"]["round"]["ai_move"] == "paper"
    assert call["data"]["data"]["finished"] is False


def test_play_round_errors_go_to_the_sender_only(emitted):
    async def _run():
        await main.play_round("sid-2", {"game_id": "ffffffff", "move": "rock"})
        await main.play_round("sid-2", {"move": "rock"})

    asyncio.run(_run())

    assert [c["event"] for c in emitted] == ["error", "error"]
    assert all(c["to"] == "sid-2" and c["room"] is None for c in emitted)
    assert emitted[0]["data"]["code"] == "SessionNotFound"
    assert emitted[1]["data"]["code"] == "invalid_request"


def test_join_unknown_game_reports_error(emitted):
    asyncio.run(main.join_game("sid-3", {"game_id": "ffffffff"}))

    assert emitted[0]["event"] == "error"
    assert emitted[0]["data"]["message"] == "Game not found"
