"""
Roshambo AI Strategy Base

Abstract base class defining the strategy interface.
All AI strategies inherit from this and implement choose_move().
"""

from abc import ABC, abstractmethod
from collections import Counter
import random
from typing import Optional, Sequence

from roshambo.engine import Move, MOVES, RoundRecord


class AIStrategy(ABC):
    """
    Abstract base class for move-selection strategies.

    Each strategy implements a different playstyle:
    - Psychology: Predicts the human from their last result, then counters
    - Chaos: Ignores history entirely
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the strategy.

        Args:
            rng: Random source (defaults to the module-level generator)
        """
        self.rng = rng or random.Random()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the strategy name."""
        pass

    @abstractmethod
    def choose_move(self, history: Sequence[RoundRecord]) -> Move:
        """
        Pick the AI's move for the next round.

        Args:
            history: Rounds played so far, oldest first

        Returns:
            The Move to play. Must never raise.
        """
        pass

    def random_move(self) -> Move:
        """Uniform pick among the three moves."""
        return self.rng.choice(MOVES)

    def _player_move_counts(self, history: Sequence[RoundRecord]) -> Counter:
        """How often the player has thrown each move."""
        return Counter(record.player_move for record in history)
