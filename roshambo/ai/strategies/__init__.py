"""
Roshambo AI Strategies

Available strategies:
- PsychologyStrategy: Normal tier, predicts and counters the human
- ChaosStrategy: Chaos tier, uniform random
"""

from .base import AIStrategy
from .psychology import PsychologyStrategy
from .chaos import ChaosStrategy

__all__ = [
    'AIStrategy',
    'PsychologyStrategy',
    'ChaosStrategy',
]
