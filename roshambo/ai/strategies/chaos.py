"""
Roshambo Chaos Strategy

Uniform random play. Nothing to learn, nothing to exploit.
"""

from typing import Sequence

from roshambo.engine import Move, RoundRecord
from .base import AIStrategy


class ChaosStrategy(AIStrategy):
    """Ignores history and throws a uniformly random move."""

    @property
    def name(self) -> str:
        return "Chaos"

    def choose_move(self, history: Sequence[RoundRecord]) -> Move:
        return self.random_move()
