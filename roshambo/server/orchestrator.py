"""
Match Orchestrator

Plays one round per request: picks the AI brain, resolves the round,
records it and finishes the game on the last round.

Per session: AwaitingMove -> RoundResolved -> (AwaitingMove | Finished)
"""

from dataclasses import dataclass
import logging
import random
from typing import Callable, Optional, Union

from roshambo.ai import ExternalModelAdapter, decide, generate_comment
from roshambo.ai.llm import ExternalModelConfig, LLMConfig, LLMProvider, get_provider
from roshambo.engine import (
    DifficultyTier, Move, RoundOutcome, RoundRecord,
    random_move, resolve, tally_field,
)
from roshambo.errors import (
    ConfigInvalid, InvalidMoveRequest, OpponentNotFound,
    RoundCountExceeded, SessionAlreadyFinished, SessionNotFound,
)

from .config import GameConfig, game_config
from .services.opponent_registry import OpponentProfile, OpponentRegistry, opponent_registry
from .session import GameSession, SessionStore, session_store

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ExternalModelConfig], LLMProvider]


@dataclass
class RoundResult:
    """The round just played."""
    number: int
    player_move: Move
    ai_move: Move
    outcome: RoundOutcome
    was_timeout: bool
    ai_source: str          # "local", "llm" or "fallback"


@dataclass
class PlayResult:
    """Everything a client needs after one play request."""
    round: RoundResult
    session: dict
    finished: bool
    comment: Optional[str] = None


class MatchOrchestrator:
    """
    Runs rounds against the session store and opponent registry.

    The external model is used only when the opponent carries a real
    credential; otherwise, or if the model misbehaves, the local engine
    decides. A play request never fails because of the model.
    """

    def __init__(
        self,
        store: SessionStore,
        registry: OpponentRegistry,
        provider_factory: Optional[ProviderFactory] = None,
        llm_config: Optional[LLMConfig] = None,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Session store
            registry: Opponent registry
            provider_factory: Builds an LLMProvider from a model config (tests inject fakes)
            llm_config: Process-wide LLM settings
            config: Game settings (default total rounds)
            rng: Random source for timeouts and local decisions
        """
        self.store = store
        self.registry = registry
        self.llm_config = llm_config or LLMConfig()
        self.provider_factory = provider_factory or (
            lambda model_config: get_provider(model_config, self.llm_config)
        )
        self.config = config or game_config
        self.rng = rng

    async def create_session(
        self,
        opponent_id: int,
        player_name: str = "Player",
        total_rounds: Optional[int] = None
    ) -> GameSession:
        """
        Start a new game against an enabled opponent.

        Raises:
            OpponentNotFound: If the opponent is unknown or disabled
        """
        profile = self.registry.get(opponent_id)
        if profile is None or not profile.enabled:
            raise OpponentNotFound(opponent_id)

        return await self.store.create_session(
            opponent_id=opponent_id,
            player_name=player_name,
            total_rounds=total_rounds or self.config.total_rounds
        )

    async def play_round(
        self,
        session_id: str,
        move: Optional[Union[Move, str]] = None,
        timeout: bool = False,
        locale: str = "zh"
    ) -> PlayResult:
        """
        Play one round.

        Args:
            session_id: The game session
            move: The player's move (ignored when timeout is set)
            timeout: The player ran out of time; a random move is played for them
            locale: Language for the closing remark

        Raises:
            InvalidMoveRequest: Neither a valid move nor timeout was given
            SessionNotFound: Unknown session
            SessionAlreadyFinished: The session is finished
            RoundCountExceeded: All rounds have been played
        """
        player_move = None if timeout else self._parse_move(move)

        if self.store.get_session(session_id) is None:
            raise SessionNotFound(session_id)

        async with self.store.lock(session_id):
            session = self.store.get_session(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            if session.is_finished:
                raise SessionAlreadyFinished(session_id)

            round_number = session.rounds_played + 1
            if round_number > session.total_rounds:
                raise RoundCountExceeded(session_id, round_number, session.total_rounds)

            if timeout:
                player_move = random_move(self.rng)

            profile = self.registry.get(session.opponent_id)
            difficulty = profile.difficulty if profile else DifficultyTier.NORMAL
            history = self.store.get_history(session_id)
            adapter = self._adapter_for(profile)

            if adapter is not None:
                decision = await adapter.decide(history, difficulty)
                ai_move, ai_source = decision.move, decision.source
            else:
                ai_move = decide(history, difficulty, rng=self.rng)
                ai_source = "local"

            outcome = resolve(player_move, ai_move)
            self.store.append_round(session_id, RoundRecord(
                round_number=round_number,
                player_move=player_move,
                ai_move=ai_move,
                outcome=outcome,
                was_timeout=timeout,
            ))
            self.store.increment_tally(session_id, tally_field(outcome))

            logger.info(
                "Session %s round %d/%d: player %s vs AI %s (%s) -> %s",
                session_id, round_number, session.total_rounds,
                player_move.value, ai_move.value, ai_source, outcome.value
            )

            comment = None
            finished = round_number == session.total_rounds
            if finished:
                comment = await self._closing_comment(adapter, session, locale)
                self.store.finalize_session(session_id, comment)

            return PlayResult(
                round=RoundResult(
                    number=round_number,
                    player_move=player_move,
                    ai_move=ai_move,
                    outcome=outcome,
                    was_timeout=timeout,
                    ai_source=ai_source,
                ),
                session=session.snapshot(),
                finished=finished,
                comment=comment,
            )

    def _parse_move(self, move: Optional[Union[Move, str]]) -> Move:
        if move is None:
            raise InvalidMoveRequest("A move is required unless the round timed out")
        if isinstance(move, Move):
            return move
        try:
            return Move(str(move).strip().lower())
        except ValueError:
            raise InvalidMoveRequest(f"Unknown move: {move!r}") from None

    def _adapter_for(self, profile: Optional[OpponentProfile]) -> Optional[ExternalModelAdapter]:
        """External adapter for LLM-backed opponents, None for local ones."""
        if profile is None or not profile.uses_external_model:
            return None

        model_config = profile.model_config.with_defaults(self.llm_config)
        try:
            model_config.validate()
            return ExternalModelAdapter(
                model_config,
                provider=self.provider_factory(model_config),
                llm_config=self.llm_config,
                rng=self.rng,
            )
        except ConfigInvalid as e:
            # Gameplay must not depend on the model; admins see this via /opponents/admin/test
            logger.error("Opponent %s has an invalid model config, playing locally: %s", profile.id, e)
            return None

    async def _closing_comment(
        self,
        adapter: Optional[ExternalModelAdapter],
        session: GameSession,
        locale: str
    ) -> str:
        if adapter is not None:
            return await adapter.comment(session.player_wins, session.ai_wins, locale)
        return generate_comment(session.player_wins, session.ai_wins, locale, rng=self.rng)


# Global orchestrator instance
orchestrator = MatchOrchestrator(session_store, opponent_registry)
