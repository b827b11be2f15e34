"""
Opponent Registry Service

Stores AI opponent profiles, including optional LLM credentials.
Profiles persist to data_dir/opponents.json when a data directory is given,
otherwise they live in memory only.
"""

from dataclasses import dataclass, field
from datetime import datetime
import json
import logging
from pathlib import Path
from typing import Optional, Union

from roshambo.ai.llm import ExternalModelConfig
from roshambo.engine import DifficultyTier
from roshambo.errors import ConfigInvalid
from ..config import game_config

logger = logging.getLogger(__name__)

# Fields an admin may change through update()
UPDATABLE_FIELDS = (
    "name", "display_name", "display_name_en", "avatar", "difficulty",
    "description", "description_en", "enabled", "sort_order",
)
MODEL_FIELDS = ("provider", "host", "api_key", "model", "api_version")


@dataclass
class OpponentProfile:
    """An AI opponent. Read-only input to the match engine."""
    id: int
    name: str
    display_name: str
    display_name_en: Optional[str] = None
    avatar: Optional[str] = None
    difficulty: DifficultyTier = DifficultyTier.NORMAL
    description: Optional[str] = None
    description_en: Optional[str] = None
    model_config: Optional[ExternalModelConfig] = None
    enabled: bool = True
    sort_order: int = 10
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def uses_external_model(self) -> bool:
        """True when the opponent has a real (non-placeholder) credential."""
        return self.model_config is not None and self.model_config.is_configured

    @property
    def model(self) -> Optional[str]:
        return self.model_config.model if self.model_config else None

    def to_dict(self, include_secrets: bool = False) -> dict:
        """
        Serialize the profile.

        Args:
            include_secrets: Include provider, host and api_key (admin/storage only)
        """
        data = {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "display_name_en": self.display_name_en,
            "avatar": self.avatar,
            "difficulty": self.difficulty.value,
            "description": self.description,
            "description_en": self.description_en,
            "model": self.model,
            "enabled": self.enabled,
            "sort_order": self.sort_order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if include_secrets:
            config = self.model_config.to_dict() if self.model_config else {}
            for key in MODEL_FIELDS:
                data[key] = config.get(key)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'OpponentProfile':
        """
        Build a profile from stored data.

        Raises:
            ConfigInvalid: On an unknown difficulty or provider
        """
        model_config = None
        if any(data.get(key) for key in ("host", "api_key", "model")):
            model_config = ExternalModelConfig.from_dict(data)

        now = datetime.now().isoformat()
        return cls(
            id=int(data["id"]),
            name=data["name"],
            display_name=data.get("display_name") or data["name"],
            display_name_en=data.get("display_name_en"),
            avatar=data.get("avatar"),
            difficulty=DifficultyTier.parse(data.get("difficulty") or DifficultyTier.NORMAL.value),
            description=data.get("description"),
            description_en=data.get("description_en"),
            model_config=model_config,
            enabled=bool(data.get("enabled", True)),
            sort_order=int(data.get("sort_order", 10)),
            created_at=data.get("created_at") or now,
            updated_at=data.get("updated_at") or now,
        )


# Built-in opponents, both local (no model credentials)
DEFAULT_OPPONENTS = [
    {
        "name": "terminator",
        "display_name": "终结者",
        "display_name_en": "Terminator",
        "avatar": "🤖",
        "difficulty": "normal",
        "description": "读心术，专治不服",
        "description_en": "Reads your mind, punishes your habits",
        "sort_order": 20,
    },
    {
        "name": "gremlin",
        "display_name": "捣蛋鬼",
        "display_name_en": "Gremlin",
        "avatar": "👾",
        "difficulty": "chaos",
        "description": "随心所欲，毫无章法",
        "description_en": "Pure chaos, no pattern at all",
        "sort_order": 10,
    },
]


class OpponentRegistry:
    """
    Opponent profile storage.

    Profiles are kept in memory and written through to a single JSON
    file when a data directory is configured.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir) if data_dir else None
        self._profiles: dict[int, OpponentProfile] = {}
        self._next_id = 1

        if self.data_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._load()

    @property
    def path(self) -> Optional[Path]:
        return self.data_dir / "opponents.json" if self.data_dir else None

    def _load(self):
        """Load stored profiles. Invalid difficulties fail here, not mid-game."""
        try:
            with open(self.path, 'r') as f:
                rows = json.load(f)
        except FileNotFoundError:
            return
        except json.JSONDecodeError as e:
            raise ConfigInvalid(f"Corrupt opponent file {self.path}: {e}") from e

        for row in rows:
            profile = OpponentProfile.from_dict(row)
            self._profiles[profile.id] = profile

        if self._profiles:
            self._next_id = max(self._profiles) + 1
        logger.info("Loaded %d opponents from %s", len(self._profiles), self.path)

    def _save(self):
        """Write all profiles (with secrets) to disk."""
        if not self.path:
            return
        rows = [p.to_dict(include_secrets=True) for p in self._profiles.values()]
        with open(self.path, 'w') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)

    def list_opponents(self, enabled_only: bool = False) -> list[OpponentProfile]:
        """
        List opponents.

        Ordered by sort_order (highest first), then id.
        """
        profiles = [
            p for p in self._profiles.values()
            if p.enabled or not enabled_only
        ]
        return sorted(profiles, key=lambda p: (-p.sort_order, p.id))

    def get(self, opponent_id: int) -> Optional[OpponentProfile]:
        """Get an opponent by ID."""
        return self._profiles.get(opponent_id)

    def create(
        self,
        name: str,
        display_name: str,
        difficulty: Union[DifficultyTier, str] = DifficultyTier.NORMAL,
        model_config: Optional[ExternalModelConfig] = None,
        **fields
    ) -> OpponentProfile:
        """
        Create an opponent.

        Args:
            name: Internal name
            display_name: Name shown to players
            difficulty: Difficulty tier
            model_config: Optional LLM credentials
            **fields: Any other OpponentProfile field (avatar, description, ...)

        Raises:
            ConfigInvalid: On an unknown difficulty
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown opponent fields: {sorted(unknown)}")

        profile = OpponentProfile(
            id=self._next_id,
            name=name,
            display_name=display_name,
            difficulty=DifficultyTier.parse(difficulty),
            model_config=model_config,
            **fields
        )
        self._profiles[profile.id] = profile
        self._next_id += 1
        self._save()
        logger.info("Created opponent %s (%s, %s)", profile.id, profile.name, profile.difficulty.value)
        return profile

    def update(self, opponent_id: int, **changes) -> Optional[OpponentProfile]:
        """
        Apply partial changes.

        Keys may be any UPDATABLE_FIELDS entry or a model field
        (provider, host, api_key, model, api_version).

        Returns:
            The updated profile, or None if not found
        """
        profile = self._profiles.get(opponent_id)
        if profile is None:
            return None

        unknown = set(changes) - set(UPDATABLE_FIELDS) - set(MODEL_FIELDS)
        if unknown:
            raise ValueError(f"Unknown opponent fields: {sorted(unknown)}")

        # Parse everything that can fail before touching the profile
        updates = {k: changes[k] for k in UPDATABLE_FIELDS if k in changes}
        if "difficulty" in updates:
            updates["difficulty"] = DifficultyTier.parse(updates["difficulty"])

        model_changes = {k: changes[k] for k in MODEL_FIELDS if k in changes}
        if model_changes:
            current = profile.model_config.to_dict() if profile.model_config else {}
            current.update(model_changes)
            updates["model_config"] = ExternalModelConfig.from_dict(current)

        for key, value in updates.items():
            setattr(profile, key, value)

        profile.updated_at = datetime.now().isoformat()
        self._save()
        return profile

    def delete(self, opponent_id: int) -> bool:
        """
        Delete an opponent by ID.

        Returns True if deleted, False if not found.
        """
        if self._profiles.pop(opponent_id, None) is None:
            return False
        self._save()
        return True

    def seed_defaults(self) -> int:
        """Add the built-in opponents if the registry is empty. Returns how many were added."""
        if self._profiles:
            return 0
        for row in DEFAULT_OPPONENTS:
            self.create(**row)
        return len(DEFAULT_OPPONENTS)


# Global registry instance
opponent_registry = OpponentRegistry(data_dir=game_config.data_dir)
