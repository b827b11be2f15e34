"""
Roshambo Rules

Outcome resolution and the move relationships every strategy builds on.
"""

import random
from typing import Optional

from .types import Move, RoundOutcome


# What each move defeats
BEATS: dict[Move, Move] = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}

# The move that defeats each move
COUNTERS: dict[Move, Move] = {
    Move.ROCK: Move.PAPER,
    Move.PAPER: Move.SCISSORS,
    Move.SCISSORS: Move.ROCK,
}

MOVES: tuple[Move, ...] = (Move.ROCK, Move.PAPER, Move.SCISSORS)

_TALLY_FIELDS: dict[RoundOutcome, str] = {
    RoundOutcome.PLAYER_WIN: "player_wins",
    RoundOutcome.AI_WIN: "ai_wins",
    RoundOutcome.DRAW: "draws",
}

_DISPLAY_NAMES: dict[str, dict[Move, str]] = {
    "zh": {Move.ROCK: "石头", Move.PAPER: "布", Move.SCISSORS: "剪刀"},
    "en": {Move.ROCK: "Rock", Move.PAPER: "Paper", Move.SCISSORS: "Scissors"},
}

_EMOJI: dict[Move, str] = {
    Move.ROCK: "✊",
    Move.PAPER: "🖐️",
    Move.SCISSORS: "✌️",
}


def resolve(player: Move, ai: Move) -> RoundOutcome:
    """
    Decide a round.

    Args:
        player: The human's move
        ai: The AI's move

    Returns:
        RoundOutcome from the player's point of view
    """
    if player == ai:
        return RoundOutcome.DRAW
    if BEATS[player] == ai:
        return RoundOutcome.PLAYER_WIN
    return RoundOutcome.AI_WIN


def counter(move: Move) -> Move:
    """Return the move that beats `move`."""
    return COUNTERS[move]


def random_move(rng: Optional[random.Random] = None) -> Move:
    """Uniformly random move (used for timeouts and the chaos tier)."""
    return (rng or random).choice(MOVES)


def tally_field(outcome: RoundOutcome) -> str:
    """Session tally incremented by `outcome`."""
    return _TALLY_FIELDS[outcome]


def display_name(move: Move, locale: str = "zh") -> str:
    names = _DISPLAY_NAMES.get(locale, _DISPLAY_NAMES["zh"])
    return names[move]


def emoji(move: Move) -> str:
    return _EMOJI[move]
