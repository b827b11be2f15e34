import asyncio

import pytest

from roshambo.engine import Move, RoundRecord, resolve
from roshambo.errors import SessionAlreadyFinished, SessionNotFound
from roshambo.server.session import SessionStatus, SessionStore


def _record(number, player_move=Move.ROCK, ai_move=Move.SCISSORS):
    return RoundRecord(
        round_number=number,
        player_move=player_move,
        ai_move=ai_move,
        outcome=resolve(player_move, ai_move),
    )


def test_create_session_starts_empty():
    store = SessionStore()
    session = asyncio.run(store.create_session(opponent_id=1, player_name="Ana", total_rounds=3))

    assert len(session.id) == 8
    assert session.status == SessionStatus.PLAYING
    assert (session.player_wins, session.ai_wins, session.draws) == (0, 0, 0)
    assert store.get_history(session.id) == []
    assert store.get_session(session.id) is session


def test_create_session_rejects_non_positive_rounds():
    store = SessionStore()
    with pytest.raises(ValueError):
        asyncio.run(store.create_session(opponent_id=1, total_rounds=0))


def test_append_round_requires_the_next_round_number():
    store = SessionStore()
    session = asyncio.run(store.create_session(opponent_id=1))

    store.append_round(session.id, _record(1))
    with pytest.raises(ValueError):
        store.append_round(session.id, _record(1))
    with pytest.raises(ValueError):
        store.append_round(session.id, _record(3))

    assert [r.round_number for r in store.get_history(session.id)] == [1]


def test_history_is_a_copy():
    store = SessionStore()
    session = asyncio.run(store.create_session(opponent_id=1))
    store.append_round(session.id, _record(1))

    history = store.get_history(session.id)
    history.clear()

    assert len(store.get_history(session.id)) == 1


def test_increment_tally_and_finalize_once():
    store = SessionStore()
    session = asyncio.run(store.create_session(opponent_id=1, total_rounds=1))

    store.append_round(session.id, _record(1))
    store.increment_tally(session.id, "player_wins")
    store.finalize_session(session.id, "Lucky.")

    assert session.player_wins == 1
    assert session.is_finished
    assert session.ai_comment == "Lucky."
    assert session.finished_at is not None

    with pytest.raises(SessionAlreadyFinished):
        store.finalize_session(session.id, "Again?")
    with pytest.raises(SessionAlreadyFinished):
        store.append_round(session.id, _record(2))
    with pytest.raises(ValueError):
        store.increment_tally(session.id, "losses")


def test_unknown_session_raises_not_found():
    store = SessionStore()
    with pytest.raises(SessionNotFound):
        store.get_history("deadbeef")
    with pytest.raises(SessionNotFound):
        store.lock("deadbeef")
    assert store.get_session("deadbeef") is None


def test_list_count_and_remove():
    store = SessionStore()

    async def _run():
        a = await store.create_session(opponent_id=1, total_rounds=1)
        b = await store.create_session(opponent_id=1)
        await store.create_session(opponent_id=2)
        store.append_round(a.id, _record(1))
        store.increment_tally(a.id, "player_wins")
        store.finalize_session(a.id, "gg")
        return a, b

    a, b = asyncio.run(_run())

    assert [s.id for s in store.list_sessions(SessionStatus.FINISHED)] == [a.id]
    assert len(store.list_sessions()) == 3
    assert store.count_for_opponent(1) == 2

    asyncio.run(store.remove_session(b.id))
    assert store.get_session(b.id) is None
    assert store.count_for_opponent(1) == 1
