import asyncio
import random

import pytest
from fastapi import HTTPException

from roshambo.ai.llm import ExternalModelConfig, LLMProvider, LLMResponse
from roshambo.engine import Move
from roshambo.errors import UpstreamFailure
from roshambo.server.models import (
    CreateGameRequest, ModelConfigRequest, OpponentCreateRequest,
    OpponentUpdateRequest, PlayRoundRequest,
)
from roshambo.server.orchestrator import orchestrator
from roshambo.server.routes import game, opponents, stats
from roshambo.server.services.opponent_registry import OpponentRegistry
from roshambo.server.session import SessionStore


class FakeProvider(LLMProvider):
    def __init__(self, replies=None):
        self.replies = list(replies or [])

    async def complete(self, prompt: str, system=None, temperature: float = 0.3, max_tokens: int = 100) -> LLMResponse:
        reply = self.replies.pop(0) if self.replies else "rock"
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model="fake-model-0613", tokens_used=1)

    @property
    def model_name(self) -> str:
        return "fake-model"


@pytest.fixture
def fresh_server(monkeypatch):
    """Point the global orchestrator at empty storage and a scripted model."""
    provider = FakeProvider()
    monkeypatch.setattr(orchestrator, "store", SessionStore())
    monkeypatch.setattr(orchestrator, "registry", OpponentRegistry())
    monkeypatch.setattr(orchestrator, "provider_factory", lambda config: provider)
    monkeypatch.setattr(orchestrator, "rng", random.Random(0))
    orchestrator.registry.seed_defaults()
    return provider


def _normal_opponent_id():
    return next(p.id for p in orchestrator.registry.list_opponents() if p.name == "terminator")


def test_create_play_and_read_game(fresh_server):
    async def _run():
        created = await game.create_game(CreateGameRequest(opponent_id=_normal_opponent_id(), total_rounds=2))
        first = await game.play_round(created.game_id, PlayRoundRequest(move=Move.ROCK, locale="en"))
        last = await game.play_round(created.game_id, PlayRoundRequest(move=Move.SCISSORS, locale="en"))
        state = await game.get_game(created.game_id)
        return created, first, last, state

    created, first, last, state = asyncio.run(_run())

    assert created.session.status == "playing"
    assert created.opponent.display_name == "终结者"
    assert first.round.ai_move == Move.PAPER
    assert first.finished is False and first.comment is None
    assert last.finished is True and last.comment
    assert state.session.status == "finished"
    assert [r.round_number for r in state.rounds] == [1, 2]


def test_play_errors_map_to_http_status(fresh_server):
    async def _run():
        created = await game.create_game(CreateGameRequest(opponent_id=_normal_opponent_id(), total_rounds=1))
        await game.play_round(created.game_id, PlayRoundRequest(move=Move.ROCK))

        with pytest.raises(HTTPException) as finished:
            await game.play_round(created.game_id, PlayRoundRequest(move=Move.ROCK))
        with pytest.raises(HTTPException) as missing_move:
            await game.play_round(created.game_id, PlayRoundRequest())
        with pytest.raises(HTTPException) as unknown:
            await game.play_round("ffffffff", PlayRoundRequest(move=Move.ROCK))
        with pytest.raises(HTTPException) as unknown_state:
            await game.get_game("ffffffff")
        with pytest.raises(HTTPException) as no_opponent:
            await game.create_game(CreateGameRequest(opponent_id=999))

        return finished, missing_move, unknown, unknown_state, no_opponent

    finished, missing_move, unknown, unknown_state, no_opponent = asyncio.run(_run())

    assert finished.value.status_code == 400
    assert missing_move.value.status_code == 400
    assert unknown.value.status_code == 404
    assert unknown_state.value.status_code == 404
    assert no_opponent.value.status_code == 404


def test_public_listing_hides_credentials_and_disabled(fresh_server):
    async def _run():
        hidden = await opponents.create_opponent(OpponentCreateRequest(
            name="hidden", display_name="Hidden", enabled=False,
        ))
        llm = await opponents.create_opponent(OpponentCreateRequest(
            name="llm", display_name="LLM", host="https://h", api_key="sk-secret", model="m",
        ))
        public = await opponents.list_opponents()
        admin = await opponents.list_all_opponents()
        return hidden, llm, public, admin

    hidden, llm, public, admin = asyncio.run(_run())

    public_ids = [o.id for o in public.opponents]
    assert hidden.id not in public_ids
    assert llm.id in public_ids
    assert all("api_key" not in o.model_dump() for o in public.opponents)
    assert admin.total == public.total + 1
    assert next(o for o in admin.opponents if o.id == llm.id).api_key == "sk-secret"


def test_update_and_delete_opponent(fresh_server):
    async def _run():
        created = await opponents.create_opponent(OpponentCreateRequest(name="tmp", display_name="Tmp"))
        updated = await opponents.update_opponent(
            created.id, OpponentUpdateRequest(difficulty="chaos", api_key="sk-new", host="https://h", model="m")
        )
        with pytest.raises(HTTPException) as missing:
            await opponents.update_opponent(999, OpponentUpdateRequest(name="x"))

        # Referenced by a game: refuse
        await game.create_game(CreateGameRequest(opponent_id=created.id))
        with pytest.raises(HTTPException) as in_use:
            await opponents.delete_opponent(created.id)

        fresh = await opponents.create_opponent(OpponentCreateRequest(name="tmp2", display_name="Tmp2"))
        deleted = await opponents.delete_opponent(fresh.id)
        with pytest.raises(HTTPException) as gone:
            await opponents.delete_opponent(fresh.id)

        return updated, missing, in_use, deleted, gone

    updated, missing, in_use, deleted, gone = asyncio.run(_run())

    assert updated.difficulty == "chaos"
    assert updated.api_key == "sk-new"
    assert missing.value.status_code == 404
    assert in_use.value.status_code == 400
    assert deleted["status"] == "deleted"
    assert gone.value.status_code == 404


def test_connection_test_and_profile_generation(fresh_server):
    fresh_server.replies = [
        "Hello!",
        '{"display_name": "影拳", "display_name_en": "Shadow Fist", "description": "出手无形", "description_en": "Unseen"}',
    ]
    request = ModelConfigRequest(host="https://h", api_key="sk-live", model="fake-model")

    async def _run():
        tested = await opponents.test_connection(request)
        generated = await opponents.generate_profile(request)
        return tested, generated

    tested, generated = asyncio.run(_run())

    assert tested.success is True
    assert tested.model == "fake-model-0613"
    assert generated.display_name_en == "Shadow Fist"


def test_diagnostics_error_mapping(fresh_server):
    fresh_server.replies = [UpstreamFailure("unauthorized", status=401)]

    async def _run():
        with pytest.raises(HTTPException) as incomplete:
            await opponents.test_connection(ModelConfigRequest(host="https://h", model="m"))
        with pytest.raises(HTTPException) as upstream:
            await opponents.test_connection(ModelConfigRequest(host="https://h", api_key="sk", model="m"))
        return incomplete, upstream

    incomplete, upstream = asyncio.run(_run())

    assert incomplete.value.status_code == 400
    assert upstream.value.status_code == 502


def test_stats_route(fresh_server):
    async def _run():
        created = await game.create_game(CreateGameRequest(opponent_id=_normal_opponent_id(), total_rounds=1))
        await game.play_round(created.game_id, PlayRoundRequest(move=Move.ROCK))
        return await stats.get_stats()

    result = asyncio.run(_run())

    assert result.total.total_games == 1
    assert {row.id for row in result.by_opponent} == {p.id for p in orchestrator.registry.list_opponents()}


def test_llm_opponent_plays_through_the_model(fresh_server):
    fresh_server.replies = ["scissors", "Lucky human."]

    async def _run():
        created_opponent = await opponents.create_opponent(OpponentCreateRequest(
            name="llm", display_name="LLM", host="https://h", api_key="sk-live", model="fake-model",
        ))
        created = await game.create_game(CreateGameRequest(opponent_id=created_opponent.id, total_rounds=1))
        return await game.play_round(created.game_id, PlayRoundRequest(move=Move.ROCK, locale="en"))

    result = asyncio.run(_run())

    assert result.round.ai_move == Move.SCISSORS
    assert result.round.ai_source == "llm"
    assert result.comment == "Lucky human."


def test_health_and_root():
    from roshambo.server.main import health_check, root

    assert asyncio.run(health_check())["status"] == "healthy"
    assert asyncio.run(root())["name"] == "Roshambo API"


def test_placeholder_key_is_stored_but_not_used(fresh_server):
    async def _run():
        created = await opponents.create_opponent(OpponentCreateRequest(
            name="sample", display_name="Sample", api_key="sk-your-api-key", model="m",
        ))
        return orchestrator.registry.get(created.id)

    profile = asyncio.run(_run())

    assert isinstance(profile.model_config, ExternalModelConfig)
    assert not profile.uses_external_model
