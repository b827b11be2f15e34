"""
Roshambo Core Types

Moves, outcomes, difficulty tiers and the immutable round record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import time

from roshambo.errors import ConfigInvalid


# =============================================================================
# Moves and Outcomes
# =============================================================================

class Move(str, Enum):
    """A hand shape. Declaration order is the tie-break order."""
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class RoundOutcome(str, Enum):
    """Result of one round, from the player's point of view."""
    PLAYER_WIN = "player_win"
    AI_WIN = "ai_win"
    DRAW = "draw"


# =============================================================================
# Opponent Settings
# =============================================================================

class DifficultyTier(str, Enum):
    """
    Opponent difficulty.

    NORMAL: psychology-driven counter play
    CHAOS: uniform random, no learning
    """
    NORMAL = "normal"
    CHAOS = "chaos"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'DifficultyTier':
        """Parse a stored difficulty, rejecting unknown values."""
        if isinstance(value, cls):
            return value
        raw = (value or "").strip().lower()
        try:
            return cls(raw)
        except ValueError:
            raise ConfigInvalid(f"Unknown difficulty: {value!r}") from None


class ProviderKind(str, Enum):
    """Supported external model APIs."""
    OPENAI = "openai"   # Any OpenAI-compatible chat completions endpoint
    AZURE = "azure"     # Azure OpenAI deployment


# =============================================================================
# Rounds
# =============================================================================

@dataclass(frozen=True)
class RoundRecord:
    """One played round. Never mutated after creation."""
    round_number: int
    player_move: Move
    ai_move: Move
    outcome: RoundOutcome
    was_timeout: bool = False
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "round_number": self.round_number,
            "player_move": self.player_move.value,
            "ai_move": self.ai_move.value,
            "outcome": self.outcome.value,
            "was_timeout": self.was_timeout,
            "created_at": self.created_at,
        }
