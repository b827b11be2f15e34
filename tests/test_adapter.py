import asyncio
import random

import pytest

from roshambo.ai import AIEngine, ExternalModelAdapter, parse_move
from roshambo.ai.commentary import COMMENTS, CommentTone
from roshambo.ai.llm import ExternalModelConfig, LLMProvider, LLMResponse
from roshambo.engine import DifficultyTier, Move, RoundRecord, resolve
from roshambo.errors import ConfigInvalid, UpstreamFailure


class FakeProvider(LLMProvider):
    """Replies from a script; an exception in the script is raised instead."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    async def complete(self, prompt: str, system=None, temperature: float = 0.3, max_tokens: int = 100) -> LLMResponse:
        self.calls.append({
            "prompt": prompt,
            "system": system,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model="fake-model", tokens_used=1)

    @property
    def model_name(self) -> str:
        return "fake-model"


def _config():
    return ExternalModelConfig(host="https://llm.example.com/v1", api_key="sk-test", model="fake-model")


def _history():
    return [
        RoundRecord(round_number=1, player_move=Move.ROCK, ai_move=Move.SCISSORS,
                    outcome=resolve(Move.ROCK, Move.SCISSORS)),
        RoundRecord(round_number=2, player_move=Move.PAPER, ai_move=Move.SCISSORS,
                    outcome=resolve(Move.PAPER, Move.SCISSORS)),
    ]


@pytest.mark.parametrize(
    "content,expected",
    [
        ("rock", Move.ROCK),
        ("I'll go with Scissors.", Move.SCISSORS),
        ("PAPER beats rock", Move.PAPER),
        ("我出石头", Move.ROCK),
        ("剪刀！", Move.SCISSORS),
        ("布", Move.PAPER),
        ('{"choice": "paper", "reason": "they love rock"}', Move.PAPER),
        ('{"move": "石头"}', Move.ROCK),
        ("我出rock", Move.ROCK),
        ("选择paper", Move.PAPER),
        ("我宣布：rock", Move.ROCK),
        ("根据分布，出 scissors", Move.SCISSORS),
        ("发布结果：剪刀", Move.SCISSORS),
        ("宣布完毕", None),
        ("rockets are cool", None),
        ("", None),
    ],
)
def test_parse_move(content, expected):
    assert parse_move(content) == expected


def test_decide_uses_model_reply_with_tier_temperature():
    provider = FakeProvider(["scissors"])
    adapter = ExternalModelAdapter(_config(), provider=provider)

    decision = asyncio.run(adapter.decide(_history(), DifficultyTier.NORMAL))

    assert decision.move == Move.SCISSORS
    assert decision.source == "llm"
    call = provider.calls[0]
    assert call["temperature"] == 0.65
    assert call["max_tokens"] == 100
    assert "Round 1: player threw rock, AI threw scissors" in call["prompt"]
    assert "round 3" in call["prompt"].lower()


def test_chaos_decision_uses_higher_temperature():
    provider = FakeProvider(["paper"])
    adapter = ExternalModelAdapter(_config(), provider=provider)

    asyncio.run(adapter.decide([], "chaos"))

    assert provider.calls[0]["temperature"] == 1.0


def test_upstream_failure_falls_back_to_local_engine():
    history = _history()
    provider = FakeProvider([UpstreamFailure("rate limited", status=429)])
    adapter = ExternalModelAdapter(_config(), provider=provider, rng=random.Random(5))

    decision = asyncio.run(adapter.decide(history, DifficultyTier.NORMAL))

    assert decision.source == "fallback"
    assert decision.move == AIEngine(DifficultyTier.NORMAL, rng=random.Random(5)).decide(history)


def test_unparseable_reply_falls_back_to_local_engine():
    provider = FakeProvider(["I refuse to play."])
    adapter = ExternalModelAdapter(_config(), provider=provider)

    decision = asyncio.run(adapter.decide([], DifficultyTier.NORMAL))

    assert decision.source == "fallback"
    assert decision.move == Move.PAPER


def test_comment_uses_outcome_specific_system_prompt():
    provider = FakeProvider(["  Luck, nothing more.  "])
    adapter = ExternalModelAdapter(_config(), provider=provider)

    comment = asyncio.run(adapter.comment(player_wins=3, ai_wins=1, locale="en"))

    assert comment == "Luck, nothing more."
    call = provider.calls[0]
    assert call["temperature"] == 0.8
    assert call["max_tokens"] == 100
    assert "just LOST" in call["system"]
    assert "the player won 3 rounds, the AI won 1 rounds" in call["prompt"]


def test_comment_falls_back_on_failure_and_empty_reply():
    failing = ExternalModelAdapter(_config(), provider=FakeProvider([UpstreamFailure("down")]))
    empty = ExternalModelAdapter(_config(), provider=FakeProvider(["   "]))

    assert asyncio.run(failing.comment(1, 3, "en")) in COMMENTS["en"][CommentTone.WIN]
    assert asyncio.run(empty.comment(2, 2, "zh")) in COMMENTS["zh"][CommentTone.DRAW]


def test_config_invalid_is_raised_before_any_call():
    provider = FakeProvider(["rock"])
    with pytest.raises(ConfigInvalid):
        ExternalModelAdapter(ExternalModelConfig(host="", api_key="sk", model="m"), provider=provider)
    assert provider.calls == []


def test_test_connection_reports_model_and_propagates_failures():
    ok = FakeProvider(["Hello"])
    result = asyncio.run(ExternalModelAdapter(_config(), provider=ok).test_connection())
    assert result["success"] is True
    assert result["model"] == "fake-model"
    assert ok.calls[0]["prompt"] == "Hi"
    assert ok.calls[0]["max_tokens"] == 5

    failing = ExternalModelAdapter(_config(), provider=FakeProvider([UpstreamFailure("401", status=401)]))
    with pytest.raises(UpstreamFailure):
        asyncio.run(failing.test_connection())


def test_generate_profile_parses_json_reply():
    reply = (
        'Here you go:\n{"display_name": "影拳", "display_name_en": "Shadow Fist", '
        '"description": "出手无形", "description_en": "You never see it coming"}'
    )
    provider = FakeProvider([reply])
    profile = asyncio.run(ExternalModelAdapter(_config(), provider=provider).generate_profile())

    assert profile == {
        "display_name": "影拳",
        "display_name_en": "Shadow Fist",
        "description": "出手无形",
        "description_en": "You never see it coming",
    }
    assert provider.calls[0]["temperature"] == 0.9
    assert provider.calls[0]["max_tokens"] == 200
    assert "fake-model" in provider.calls[0]["prompt"]


def test_generate_profile_rejects_unparseable_reply():
    adapter = ExternalModelAdapter(_config(), provider=FakeProvider(["Sorry, I can't."]))
    with pytest.raises(UpstreamFailure):
        asyncio.run(adapter.generate_profile())
