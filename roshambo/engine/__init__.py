"""
Roshambo Engine

Core game types and the rules that decide a round.
"""

from .types import (
    Move, RoundOutcome, DifficultyTier, ProviderKind, RoundRecord,
)

from .rules import (
    BEATS, COUNTERS, MOVES,
    resolve, counter, random_move, tally_field, display_name, emoji,
)

__all__ = [
    # Types
    'Move',
    'RoundOutcome',
    'DifficultyTier',
    'ProviderKind',
    'RoundRecord',
    # Rules
    'BEATS',
    'COUNTERS',
    'MOVES',
    'resolve',
    'counter',
    'random_move',
    'tally_field',
    'display_name',
    'emoji',
]
