"""
Roshambo AI Engine

Local decision engine. Picks the AI's move from the round history
without any external call.
"""

import logging
import random
from typing import Optional, Sequence, Union

from roshambo.engine import DifficultyTier, Move, RoundRecord
from roshambo.errors import ConfigInvalid
from .strategies import AIStrategy, PsychologyStrategy, ChaosStrategy

logger = logging.getLogger(__name__)


class AIEngine:
    """
    Main AI engine for choosing moves.

    Supports two difficulty tiers:
    - normal: Psychology-driven prediction and counter play
    - chaos: Uniform random moves
    """

    # Difficulty settings. Every DifficultyTier must have an entry.
    DIFFICULTY_SETTINGS = {
        DifficultyTier.NORMAL: {
            'strategy': PsychologyStrategy,
            'llm_temperature': 0.65,   # External model sampling temperature
        },
        DifficultyTier.CHAOS: {
            'strategy': ChaosStrategy,
            'llm_temperature': 1.0,
        },
    }

    def __init__(
        self,
        difficulty: Union[DifficultyTier, str] = DifficultyTier.NORMAL,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the AI engine.

        Args:
            difficulty: Difficulty tier (or its stored string form)
            rng: Random source shared with the strategy (seed it in tests)

        Raises:
            ConfigInvalid: If the difficulty is not a known tier
        """
        self.difficulty = DifficultyTier.parse(difficulty)

        if self.difficulty not in self.DIFFICULTY_SETTINGS:
            raise ConfigInvalid(f"No settings for difficulty: {self.difficulty.value}")

        self.settings = self.DIFFICULTY_SETTINGS[self.difficulty]
        self.strategy: AIStrategy = self.settings['strategy'](rng=rng)

    @property
    def temperature(self) -> float:
        """Sampling temperature used when this tier is delegated to an LLM."""
        return self.settings['llm_temperature']

    def decide(self, history: Sequence[RoundRecord]) -> Move:
        """
        Choose the AI's move for the next round.

        Args:
            history: Rounds played so far, oldest first

        Returns:
            The chosen Move. Always succeeds.
        """
        move = self.strategy.choose_move(history)
        logger.debug(
            "Local %s engine chose %s after %d rounds",
            self.strategy.name, move.value, len(history)
        )
        return move


def decide(
    history: Sequence[RoundRecord],
    difficulty: Union[DifficultyTier, str],
    rng: Optional[random.Random] = None
) -> Move:
    """
    Decide the AI's next move locally.

    Entry point used by the orchestrator for opponents without a usable
    model. Shorthand for AIEngine(difficulty, rng).decide(history).
    """
    return AIEngine(difficulty, rng=rng).decide(history)
