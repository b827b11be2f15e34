"""
API LLM Providers

Chat-completions clients for OpenAI-compatible endpoints and Azure OpenAI.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from roshambo.engine import ProviderKind
from roshambo.errors import ConfigInvalid, UpstreamFailure
from .base import LLMProvider, LLMResponse
from .config import ExternalModelConfig, LLMConfig

logger = logging.getLogger(__name__)


class ChatCompletionsProvider(LLMProvider):
    """
    Shared request/response handling for chat-completions style APIs.

    Subclasses supply the URL and auth headers.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 30.0
    ):
        """
        Initialize the provider.

        Args:
            api_key: API credential
            model: Model name (or Azure deployment name)
            timeout: Total request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    def model_name(self) -> str:
        """Return the model identifier."""
        return self.model

    @property
    def url(self) -> str:
        raise NotImplementedError

    def headers(self) -> dict[str, str]:
        raise NotImplementedError

    def build_payload(
        self,
        prompt: str,
        system: Optional[str],
        temperature: float,
        max_tokens: int
    ) -> dict:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        return {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_completion_tokens": max_tokens
        }

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 100
    ) -> LLMResponse:
        """Generate a completion. Raises UpstreamFailure on any failure."""
        payload = self.build_payload(prompt, system, temperature, max_tokens)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        logger.debug("POST %s (model=%s, temperature=%s)", self.url, self.model, temperature)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.url,
                    headers=self.headers(),
                    json=payload
                ) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        raise UpstreamFailure(
                            f"{self.__class__.__name__} error {resp.status}: {error_text[:500]}",
                            status=resp.status
                        )

                    data = await resp.json(content_type=None)
        except UpstreamFailure:
            raise
        except asyncio.TimeoutError as e:
            raise UpstreamFailure(f"{self.__class__.__name__} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise UpstreamFailure(f"{self.__class__.__name__} request failed: {e}") from e
        except ValueError as e:
            raise UpstreamFailure(f"{self.__class__.__name__} returned invalid JSON: {e}") from e

        return self._parse_response(data)

    def _parse_response(self, data: dict) -> LLMResponse:
        try:
            choices = data.get("choices") or []
            if not choices:
                raise UpstreamFailure("Model returned no choices")
            content = (choices[0].get("message") or {}).get("content") or ""
        except AttributeError as e:
            raise UpstreamFailure(f"Unexpected completion payload: {e}") from e

        return LLMResponse(
            content=content,
            model=data.get("model") or self.model,
            tokens_used=(data.get("usage") or {}).get("total_tokens", 0),
            raw_response=data
        )


class OpenAIProvider(ChatCompletionsProvider):
    """
    LLM provider for OpenAI and OpenAI-compatible APIs.

    `host` is the API base URL, e.g. https://api.openai.com/v1.
    """

    def __init__(
        self,
        api_key: str,
        host: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        timeout: float = 30.0
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout)
        self.host = host.rstrip('/')

    @property
    def url(self) -> str:
        return f"{self.host}/chat/completions"

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }


class AzureOpenAIProvider(ChatCompletionsProvider):
    """
    LLM provider for Azure OpenAI.

    `endpoint` is the resource URL and `model` the deployment name.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        model: str,
        api_version: str = "2024-12-01-preview",
        timeout: float = 30.0
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout)
        self.endpoint = endpoint.rstrip('/')
        self.api_version = api_version

    @property
    def url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/{self.model}/chat/completions"
            f"?api-version={self.api_version}"
        )

    def headers(self) -> dict[str, str]:
        return {
            "api-key": self.api_key,
            "Content-Type": "application/json"
        }

    def build_payload(
        self,
        prompt: str,
        system: Optional[str],
        temperature: float,
        max_tokens: int
    ) -> dict:
        # The deployment in the URL selects the model
        payload = super().build_payload(prompt, system, temperature, max_tokens)
        payload.pop("model", None)
        return payload


def get_provider(
    config: ExternalModelConfig,
    llm_config: Optional[LLMConfig] = None
) -> LLMProvider:
    """
    Build the provider for an opponent's model config.

    Args:
        config: The opponent's ExternalModelConfig
        llm_config: Process-wide settings (timeout, Azure API version)

    Returns:
        A ready LLMProvider

    Raises:
        ConfigInvalid: If host, key or model is missing
    """
    llm_config = llm_config or LLMConfig()
    config.validate()

    if config.provider == ProviderKind.OPENAI:
        return OpenAIProvider(
            api_key=config.api_key,
            host=config.host,
            model=config.model,
            timeout=llm_config.timeout
        )

    elif config.provider == ProviderKind.AZURE:
        return AzureOpenAIProvider(
            api_key=config.api_key,
            endpoint=config.host,
            model=config.model,
            api_version=config.api_version or llm_config.azure_api_version,
            timeout=llm_config.timeout
        )

    raise ConfigInvalid(f"Unknown provider type: {config.provider}")
