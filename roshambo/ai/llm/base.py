"""
LLM Provider Base Classes

Abstract interface for external model gateways (OpenAI-compatible, Azure OpenAI).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import json
import re
from typing import Optional, Any

from roshambo.errors import UpstreamFailure


@dataclass
class LLMResponse:
    """Response from an LLM completion."""
    content: str
    model: str
    tokens_used: int
    raw_response: Optional[Any] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Providers send one chat completion and return its text. Every
    transport, HTTP or payload problem must surface as UpstreamFailure.
    """

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 100
    ) -> LLMResponse:
        """
        Generate a completion for the given prompt.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            temperature: Sampling temperature (0.0-2.0)
            max_tokens: Completion token cap

        Returns:
            LLMResponse with generated content

        Raises:
            UpstreamFailure: On any network, auth, rate-limit or payload error
        """
        pass

    async def complete_json(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 200
    ) -> dict:
        """
        Generate a completion and parse the JSON object inside it.

        Raises:
            UpstreamFailure: If the call fails or no JSON object can be parsed
        """
        response = await self.complete(
            prompt=prompt,
            system=system,
            temperature=temperature,
            max_tokens=max_tokens
        )
        parsed = parse_json_object(response.content)
        if parsed is None:
            raise UpstreamFailure(f"Could not parse JSON from model reply: {response.content[:200]!r}")
        return parsed

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass


def parse_json_object(content: str) -> Optional[dict]:
    """
    Parse a JSON object from an LLM reply, handling common formatting issues.

    Returns:
        The parsed dict, or None if nothing parseable was found
    """
    content = (content or "").strip()

    # Remove markdown code blocks
    if content.startswith("```"):
        content = re.sub(r'^```(?:json)?\s*', '', content)
        content = re.sub(r'\s*```$', '', content)

    try:
        parsed = json.loads(content)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Try to find a JSON object in the reply
    json_match = re.search(r'\{[\s\S]*\}', content)
    if json_match:
        try:
            parsed = json.loads(json_match.group())
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

    return None
