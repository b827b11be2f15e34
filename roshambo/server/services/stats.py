"""
Statistics Service

Aggregates finished games, overall and per enabled opponent.
"""

from ..session import SessionStatus, SessionStore
from .opponent_registry import OpponentRegistry


def _win_rate(won: int, played: int) -> float:
    """Percentage of games won, one decimal."""
    if played == 0:
        return 0.0
    return round(won / played * 100, 1)


def compute_stats(store: SessionStore, registry: OpponentRegistry) -> dict:
    """
    Build the statistics payload.

    Only finished sessions count. A game is a player win when the player
    took more rounds than the AI.

    Returns:
        dict with "total" (summed tallies and game count) and "by_opponent"
        (one entry per enabled opponent, ordered by id)
    """
    finished = store.list_sessions(SessionStatus.FINISHED)

    total = {
        "total_player_wins": sum(s.player_wins for s in finished),
        "total_ai_wins": sum(s.ai_wins for s in finished),
        "total_draws": sum(s.draws for s in finished),
        "total_games": len(finished),
    }

    by_opponent = []
    opponents = sorted(registry.list_opponents(enabled_only=True), key=lambda p: p.id)
    for profile in opponents:
        games = [s for s in finished if s.opponent_id == profile.id]
        games_won = sum(1 for s in games if s.player_wins > s.ai_wins)
        by_opponent.append({
            "id": profile.id,
            "name": profile.display_name,
            "name_en": profile.display_name_en,
            "avatar": profile.avatar,
            "difficulty": profile.difficulty.value,
            "games_played": len(games),
            "player_wins": sum(s.player_wins for s in games),
            "ai_wins": sum(s.ai_wins for s in games),
            "draws": sum(s.draws for s in games),
            "player_win_rate": _win_rate(games_won, len(games)),
        })

    return {"total": total, "by_opponent": by_opponent}
