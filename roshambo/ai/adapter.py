"""
External Model Adapter

Lets an LLM play for an opponent. Gameplay calls (decide, comment) never
fail because of the model: any upstream problem falls back to the local
engine or the canned commentary. Diagnostic calls (test_connection,
generate_profile) report upstream problems to the caller instead.
"""

from dataclasses import dataclass
import logging
import random
import re
from typing import Optional, Sequence, Union

from roshambo.engine import DifficultyTier, Move, RoundRecord
from roshambo.errors import UpstreamFailure
from .commentary import COMMENTS, DEFAULT_LOCALE, classify_tone, generate_comment
from .engine import AIEngine
from .llm import ExternalModelConfig, LLMConfig, LLMProvider, get_provider, parse_json_object
from .llm import prompts

logger = logging.getLogger(__name__)

DECISION_MAX_TOKENS = 100
COMMENT_MAX_TOKENS = 100
COMMENT_TEMPERATURE = 0.8
PROFILE_MAX_TOKENS = 200
PROFILE_TEMPERATURE = 0.9
PING_MAX_TOKENS = 5

_STRATEGY_TEXT = {
    DifficultyTier.NORMAL: prompts.NORMAL_STRATEGY,
    DifficultyTier.CHAOS: prompts.CHAOS_STRATEGY,
}

# English words must stand alone among ASCII letters; a bare 布 inside a
# common compound (宣布, 分布, 发布, 公布, 布置) is not a move
_MOVE_TOKEN = re.compile(
    r"(?<![A-Za-z])(rock|paper|scissors)(?![A-Za-z])"
    r"|石头|剪刀|(?<![宣分发公])布(?!置)",
    re.IGNORECASE,
)

_MOVE_WORDS = {
    "rock": Move.ROCK,
    "paper": Move.PAPER,
    "scissors": Move.SCISSORS,
    "石头": Move.ROCK,
    "布": Move.PAPER,
    "剪刀": Move.SCISSORS,
}


@dataclass
class MoveDecision:
    """A move plus where it came from."""
    move: Move
    source: str             # "llm" or "fallback"
    reasoning: str = ""


def parse_move(content: str) -> Optional[Move]:
    """
    Extract the first recognizable move from a model reply.

    Accepts a JSON body with a "choice"/"move" field, otherwise the
    earliest English or Chinese move name in the text (case-insensitive).

    Returns:
        The Move, or None if the reply names no move
    """
    text = (content or "").strip()
    if not text:
        return None

    parsed = parse_json_object(text) if "{" in text else None
    if parsed:
        for key in ("choice", "move"):
            value = parsed.get(key)
            if isinstance(value, str) and value.strip().lower() in _MOVE_WORDS:
                return _MOVE_WORDS[value.strip().lower()]

    match = _MOVE_TOKEN.search(text)
    if not match:
        return None
    return _MOVE_WORDS[match.group(0).lower()]


def build_decision_system(difficulty: DifficultyTier) -> str:
    return prompts.DECISION_SYSTEM.format(strategy=_STRATEGY_TEXT[difficulty])


def build_decision_prompt(history: Sequence[RoundRecord]) -> str:
    """Round-by-round history followed by the question for the next round."""
    if not history:
        return prompts.DECISION_FIRST_ROUND_PROMPT

    lines = [
        prompts.HISTORY_LINE.format(
            round_number=record.round_number,
            player_move=record.player_move.value,
            ai_move=record.ai_move.value,
            outcome=prompts.OUTCOME_LABELS[record.outcome.value],
        )
        for record in history
    ]
    return prompts.DECISION_PROMPT.format(
        history="\n".join(lines),
        round_number=len(history) + 1,
    )


def _normalize_locale(locale: Optional[str]) -> str:
    return locale if locale in COMMENTS else DEFAULT_LOCALE


class ExternalModelAdapter:
    """
    Routes decisions and commentary for one opponent through its LLM.

    The config is validated on construction, before any network call.
    """

    def __init__(
        self,
        config: ExternalModelConfig,
        provider: Optional[LLMProvider] = None,
        llm_config: Optional[LLMConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the adapter.

        Args:
            config: The opponent's model config
            provider: Pre-built provider (tests inject fakes here)
            llm_config: Process-wide LLM settings
            rng: Random source for the local fallbacks

        Raises:
            ConfigInvalid: If host, key or model is missing
        """
        config.validate()
        self.config = config
        self.provider = provider or get_provider(config, llm_config)
        self.rng = rng

    # === Gameplay ===========================================================

    async def decide(
        self,
        history: Sequence[RoundRecord],
        difficulty: Union[DifficultyTier, str]
    ) -> MoveDecision:
        """
        Ask the model for the AI's next move.

        Falls back to the local engine if the call fails or the reply
        names no move. Never raises for upstream problems.
        """
        engine = AIEngine(difficulty, rng=self.rng)
        system = build_decision_system(engine.difficulty)
        prompt = build_decision_prompt(history)

        logger.debug("Decision system prompt:\n%s", system)
        logger.debug("Decision user prompt:\n%s", prompt)

        try:
            response = await self.provider.complete(
                prompt=prompt,
                system=system,
                temperature=engine.temperature,
                max_tokens=DECISION_MAX_TOKENS
            )
        except Exception as e:
            # LLM failures should not wedge the match.
            logger.warning(
                "Model %s decision failed, using local %s engine: %s",
                self.provider.model_name, engine.difficulty.value, e
            )
            return MoveDecision(
                move=engine.decide(history),
                source="fallback",
                reasoning=f"upstream failure: {e}"
            )

        move = parse_move(response.content)
        if move is None:
            logger.warning(
                "Could not parse a move from model %s reply %r, using local engine",
                self.provider.model_name, response.content[:200]
            )
            return MoveDecision(
                move=engine.decide(history),
                source="fallback",
                reasoning=f"unparseable reply: {response.content.strip()[:200]}"
            )

        return MoveDecision(move=move, source="llm", reasoning=response.content.strip())

    async def comment(self, player_wins: int, ai_wins: int, locale: str = DEFAULT_LOCALE) -> str:
        """
        Ask the model for a closing remark.

        Falls back to the canned commentary on failure or an empty reply.
        """
        locale = _normalize_locale(locale)
        tone = classify_tone(player_wins, ai_wins).value

        system = prompts.COMMENT_SYSTEM[locale][tone]
        prompt = prompts.COMMENT_PROMPT[locale].format(
            player_wins=player_wins,
            ai_wins=ai_wins,
            verdict=prompts.COMMENT_VERDICT[locale][tone],
        )

        try:
            response = await self.provider.complete(
                prompt=prompt,
                system=system,
                temperature=COMMENT_TEMPERATURE,
                max_tokens=COMMENT_MAX_TOKENS
            )
        except Exception as e:
            logger.warning("Model %s comment failed, using canned remark: %s", self.provider.model_name, e)
            return generate_comment(player_wins, ai_wins, locale, rng=self.rng)

        text = response.content.strip()
        if not text:
            logger.warning("Model %s returned an empty comment, using canned remark", self.provider.model_name)
            return generate_comment(player_wins, ai_wins, locale, rng=self.rng)
        return text

    # === Diagnostics ========================================================

    async def test_connection(self) -> dict:
        """
        Send a tiny completion to prove the credentials work.

        Raises:
            UpstreamFailure: If the model cannot be reached or answers badly
        """
        response = await self.provider.complete(
            prompt=prompts.PING_PROMPT,
            max_tokens=PING_MAX_TOKENS
        )
        logger.info("Connection test to %s succeeded", response.model)
        return {
            "success": True,
            "message": "Connection OK",
            "model": response.model or self.provider.model_name,
        }

    async def generate_profile(self) -> dict:
        """
        Have the model invent its own opponent name and description.

        Returns:
            dict with display_name, display_name_en, description, description_en

        Raises:
            UpstreamFailure: If the call fails or the reply is not the expected JSON
        """
        parsed = await self.provider.complete_json(
            prompt=prompts.PROFILE_PROMPT.format(model=self.provider.model_name),
            system=prompts.PROFILE_SYSTEM,
            temperature=PROFILE_TEMPERATURE,
            max_tokens=PROFILE_MAX_TOKENS
        )
        profile = {key: str(parsed.get(key) or "").strip() for key in prompts.PROFILE_KEYS}
        if not any(profile.values()):
            raise UpstreamFailure("Model reply contained none of the profile fields")
        return profile
