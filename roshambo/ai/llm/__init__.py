"""
Roshambo LLM Subsystem

Provides external model integration for LLM-backed opponents.
Supports OpenAI-compatible APIs and Azure OpenAI deployments.
"""

from .base import LLMProvider, LLMResponse, parse_json_object
from .config import LLMConfig, ExternalModelConfig, PLACEHOLDER_KEY_MARKER
from .api_provider import OpenAIProvider, AzureOpenAIProvider, get_provider

__all__ = [
    'LLMProvider',
    'LLMResponse',
    'parse_json_object',
    'LLMConfig',
    'ExternalModelConfig',
    'PLACEHOLDER_KEY_MARKER',
    'OpenAIProvider',
    'AzureOpenAIProvider',
    'get_provider',
]
