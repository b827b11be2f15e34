import pytest

from roshambo.ai.llm import (
    AzureOpenAIProvider, ExternalModelConfig, LLMConfig, OpenAIProvider,
    get_provider, parse_json_object,
)
from roshambo.engine import ProviderKind
from roshambo.errors import ConfigInvalid, UpstreamFailure


def test_openai_provider_url_headers_and_payload():
    provider = OpenAIProvider(api_key="sk-test", host="https://example.com/v1/", model="gpt-test")

    assert provider.url == "https://example.com/v1/chat/completions"
    assert provider.headers()["Authorization"] == "Bearer sk-test"

    payload = provider.build_payload("Your move?", "You play RPS.", 0.65, 100)
    assert payload["model"] == "gpt-test"
    assert payload["temperature"] == 0.65
    assert payload["max_completion_tokens"] == 100
    assert payload["messages"] == [
        {"role": "system", "content": "You play RPS."},
        {"role": "user", "content": "Your move?"},
    ]


def test_azure_provider_routes_by_deployment():
    provider = AzureOpenAIProvider(
        api_key="azure-key",
        endpoint="https://res.openai.azure.com/",
        model="my-deploy",
        api_version="2024-12-01-preview",
    )

    assert provider.url == (
        "https://res.openai.azure.com/openai/deployments/my-deploy/chat/completions"
        "?api-version=2024-12-01-preview"
    )
    assert provider.headers()["api-key"] == "azure-key"
    payload = provider.build_payload("Hi", None, 0.3, 5)
    assert "model" not in payload
    assert payload["messages"] == [{"role": "user", "content": "Hi"}]


def test_get_provider_dispatches_on_kind():
    llm_config = LLMConfig(timeout=12.0)
    openai = get_provider(
        ExternalModelConfig(host="https://api.example.com/v1", api_key="k", model="m"),
        llm_config,
    )
    azure = get_provider(
        ExternalModelConfig(provider=ProviderKind.AZURE, host="https://res", api_key="k", model="d"),
        llm_config,
    )

    assert isinstance(openai, OpenAIProvider)
    assert isinstance(azure, AzureOpenAIProvider)
    assert openai.timeout == 12.0


def test_get_provider_rejects_incomplete_config():
    with pytest.raises(ConfigInvalid) as exc:
        get_provider(ExternalModelConfig(host="https://x", api_key="", model="m"))
    assert "api_key" in str(exc.value)


def test_parse_response_without_choices_is_upstream_failure():
    provider = OpenAIProvider(api_key="k")
    with pytest.raises(UpstreamFailure):
        provider._parse_response({"choices": []})

    response = provider._parse_response({
        "model": "gpt-4o-mini-2024",
        "choices": [{"message": {"content": "rock"}}],
        "usage": {"total_tokens": 12},
    })
    assert response.content == "rock"
    assert response.model == "gpt-4o-mini-2024"
    assert response.tokens_used == 12


def test_placeholder_keys_are_not_configured():
    assert not ExternalModelConfig(api_key="sk-your-api-key-here").is_configured
    assert not ExternalModelConfig(api_key="  ").is_configured
    assert ExternalModelConfig(api_key="sk-real").is_configured


def test_with_defaults_fills_openai_host_and_model_only():
    llm_config = LLMConfig()
    openai = ExternalModelConfig(api_key="k").with_defaults(llm_config)
    assert openai.host == llm_config.default_host
    assert openai.model == llm_config.default_model

    azure = ExternalModelConfig(provider=ProviderKind.AZURE, api_key="k", model="d").with_defaults(llm_config)
    assert azure.host is None
    with pytest.raises(ConfigInvalid):
        azure.validate()


def test_unknown_provider_is_config_invalid():
    with pytest.raises(ConfigInvalid):
        ExternalModelConfig.from_dict({"provider": "ollama", "api_key": "k"})


def test_parse_json_object_handles_fences_and_prose():
    assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_object('Sure! {"choice": "rock"} Good luck.') == {"choice": "rock"}
    assert parse_json_object("no json here") is None
    assert parse_json_object("[1, 2]") is None
