"""
Server Configuration

Game settings read from the environment.
"""

from dataclasses import dataclass, field
from typing import Optional
import os


def _env_data_dir() -> Optional[str]:
    return os.environ.get("ROSHAMBO_DATA_DIR") or None


@dataclass
class GameConfig:
    """Settings for new sessions and storage."""

    # Rounds per game (best of N)
    total_rounds: int = field(
        default_factory=lambda: int(os.environ.get("ROSHAMBO_TOTAL_ROUNDS", "5"))
    )

    # Opponent registry directory; None keeps opponents in memory only
    data_dir: Optional[str] = field(default_factory=_env_data_dir)

    # Seed the two built-in opponents when the registry is empty
    seed_opponents: bool = field(
        default_factory=lambda: os.environ.get("ROSHAMBO_SEED_OPPONENTS", "1") != "0"
    )


game_config = GameConfig()
