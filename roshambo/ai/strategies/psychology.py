"""
Roshambo Psychology Strategy

The Normal-tier opponent: reads the human's reaction to the previous round.

Predictions by last result:
- AI won: the player retaliates with whatever beats the AI's last move
- Player won: the player rides the hot hand and repeats
- Draw: the player switches, to the remaining move they favour most
"""

from typing import Sequence

from roshambo.engine import Move, MOVES, RoundOutcome, RoundRecord, counter
from .base import AIStrategy


class PsychologyStrategy(AIStrategy):
    """
    Counter-play driven by human loss/win/draw reactions.

    The opening move is fixed: humans open with Rock more than anything
    else, so Paper is played on round one.
    """

    OPENING_MOVE = Move.PAPER

    @property
    def name(self) -> str:
        return "Psychology"

    def choose_move(self, history: Sequence[RoundRecord]) -> Move:
        if not history:
            return self.OPENING_MOVE

        last = history[-1]

        if last.outcome == RoundOutcome.AI_WIN:
            predicted = counter(last.ai_move)
            return counter(predicted)

        if last.outcome == RoundOutcome.PLAYER_WIN:
            return counter(last.player_move)

        if last.outcome == RoundOutcome.DRAW:
            return counter(self._predict_switch(history, last.player_move))

        return self._counter_most_frequent(history)

    def _predict_switch(self, history: Sequence[RoundRecord], last_move: Move) -> Move:
        """
        Predict the move a player switches to after a draw.

        The favourite of the two remaining moves wins; an even split
        (including never having thrown either) is a coin flip.
        """
        counts = self._player_move_counts(history)
        first, second = [m for m in MOVES if m != last_move]

        if counts[first] > counts[second]:
            return first
        if counts[second] > counts[first]:
            return second
        return self.rng.choice((first, second))

    def _counter_most_frequent(self, history: Sequence[RoundRecord]) -> Move:
        """Counter the player's overall favourite. Ties go to Rock, Paper, Scissors order."""
        counts = self._player_move_counts(history)
        favourite = Move.ROCK
        best = 0
        for move in MOVES:
            if counts[move] > best:
                best = counts[move]
                favourite = move
        return counter(favourite)
