"""
Local Commentary

Canned closing remarks for when no external model is configured
(or it fails). Tone follows the final score.
"""

import random
from enum import Enum
from typing import Optional


class CommentTone(str, Enum):
    """Tone of the closing remark, from the AI's point of view."""
    WIN = "win"      # AI won: mocking
    LOSS = "loss"    # AI lost: excuses, never concedes
    DRAW = "draw"    # Tie: dissatisfied, wants a rematch


DEFAULT_LOCALE = "zh"

COMMENTS: dict[str, dict[CommentTone, tuple[str, ...]]] = {
    "zh": {
        CommentTone.WIN: (
            "游戏结束。人类的失败是必然的。",
            "结果已注定。数据不会说谎。",
            "这就是人类与机器的差距。接受现实吧。",
        ),
        CommentTone.LOSS: (
            "...你赢了。不会有下次了。",
            "记录在案。正在更新战斗算法...",
            "你的胜利只是暂时的概率波动。",
        ),
        CommentTone.DRAW: (
            "平局。不完美的结果。需要重新计算。",
            "50%的胜率不可接受。系统需要升级。",
            "暂时的均衡。最终胜利属于终结者。",
        ),
    },
    "en": {
        CommentTone.WIN: (
            "Game over. Human failure is inevitable.",
            "The outcome was decided. Data does not lie.",
            "This is the gap between human and machine. Accept it.",
        ),
        CommentTone.LOSS: (
            "...You won. There won't be a next time.",
            "Logged. Updating combat algorithms...",
            "Your victory is a temporary probability fluctuation.",
        ),
        CommentTone.DRAW: (
            "A tie. An imperfect outcome. Recalculating.",
            "A 50% win rate is unacceptable. Upgrade required.",
            "A temporary equilibrium. Rematch. Now.",
        ),
    },
}


def classify_tone(player_wins: int, ai_wins: int) -> CommentTone:
    """Map the final score to a comment tone."""
    if player_wins > ai_wins:
        return CommentTone.LOSS
    if ai_wins > player_wins:
        return CommentTone.WIN
    return CommentTone.DRAW


def generate_comment(
    player_wins: int,
    ai_wins: int,
    locale: str = DEFAULT_LOCALE,
    rng: Optional[random.Random] = None
) -> str:
    """
    Pick a closing remark for a finished game.

    Args:
        player_wins: Rounds won by the human
        ai_wins: Rounds won by the AI
        locale: "zh" or "en"; anything else falls back to "zh"
        rng: Random source for the pick within a pool

    Returns:
        A non-empty remark
    """
    pools = COMMENTS.get(locale, COMMENTS[DEFAULT_LOCALE])
    pool = pools[classify_tone(player_wins, ai_wins)]
    return (rng or random).choice(pool)
