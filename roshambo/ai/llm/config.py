"""
LLM Configuration

Per-opponent model credentials and process-wide generation settings.
"""

from dataclasses import dataclass, field
from typing import Optional
import os

from roshambo.engine import ProviderKind
from roshambo.errors import ConfigInvalid


# Keys containing this marker are sample values, never real credentials
PLACEHOLDER_KEY_MARKER = "your-api-key"

DEFAULT_OPENAI_HOST = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-12-01-preview"


@dataclass
class LLMConfig:
    """Process-wide settings shared by every provider."""

    # Request settings
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("ROSHAMBO_LLM_TIMEOUT", "30"))
    )

    # Azure settings
    azure_api_version: str = field(
        default_factory=lambda: os.environ.get("ROSHAMBO_AZURE_API_VERSION", DEFAULT_AZURE_API_VERSION)
    )

    # Defaults for opponents that leave host/model blank
    default_host: str = DEFAULT_OPENAI_HOST
    default_model: str = DEFAULT_OPENAI_MODEL


@dataclass
class ExternalModelConfig:
    """
    Credentials and endpoint for an LLM-backed opponent.

    For Azure, `host` is the resource endpoint and `model` the deployment name.
    """
    provider: ProviderKind = ProviderKind.OPENAI
    host: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    api_version: str = DEFAULT_AZURE_API_VERSION

    @property
    def is_configured(self) -> bool:
        """True when the key looks like a real credential."""
        key = (self.api_key or "").strip()
        return bool(key) and PLACEHOLDER_KEY_MARKER not in key

    def validate(self) -> None:
        """
        Check the config before any network call.

        Raises:
            ConfigInvalid: If host, key or model is missing
        """
        missing = [
            name for name, value in (
                ("host", self.host),
                ("api_key", self.api_key),
                ("model", self.model),
            )
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigInvalid(f"Incomplete model config, missing: {', '.join(missing)}")

    def with_defaults(self, llm_config: Optional[LLMConfig] = None) -> 'ExternalModelConfig':
        """
        Fill blank host/model the way stored opponents expect.

        Azure has no public default endpoint, so its host is left as-is.
        """
        llm_config = llm_config or LLMConfig()
        host = self.host
        if not host and self.provider == ProviderKind.OPENAI:
            host = llm_config.default_host
        return ExternalModelConfig(
            provider=self.provider,
            host=host,
            api_key=self.api_key,
            model=self.model or llm_config.default_model,
            api_version=self.api_version or llm_config.azure_api_version,
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'ExternalModelConfig':
        provider = (data.get("provider") or ProviderKind.OPENAI.value).strip().lower()
        try:
            kind = ProviderKind(provider)
        except ValueError:
            raise ConfigInvalid(f"Unknown provider: {provider!r}") from None
        return cls(
            provider=kind,
            host=data.get("host"),
            api_key=data.get("api_key"),
            model=data.get("model"),
            api_version=data.get("api_version") or DEFAULT_AZURE_API_VERSION,
        )

    def to_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "host": self.host,
            "api_key": self.api_key,
            "model": self.model,
            "api_version": self.api_version,
        }
