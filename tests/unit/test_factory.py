# tests/unit/test_factory.py
"""Tests for create_chat_client provider selection and validation."""

import pytest

from maximo_gateway.config.schema import GatewayConfig
from maximo_gateway.errors import ConfigurationError
from maximo_gateway.llm.anthropic_client import AnthropicChatClient
from maximo_gateway.llm.factory import create_chat_client, is_openai_compatible
from maximo_gateway.llm.gemini import GeminiChatClient
from maximo_gateway.llm.openai_compat import OpenAICompatClient
from maximo_gateway.llm.watsonx import WatsonxChatClient


def config_with_keys(**overrides):
    data = {
        "providers": {
            name: {"api_key": f"{name}-key"}
            for name in ("openai", "mistral", "deepseek", "anthropic", "gemini", "watsonx")
        }
    }
    data["providers"]["watsonx"]["project_id"] = "proj"
    for name, values in overrides.items():
        data["providers"][name].update(values)
    return GatewayConfig.model_validate(data)


class TestCreateChatClient:
    """Test client class per provider."""

    @pytest.mark.parametrize(
        "provider,cls",
        [
            ("openai", OpenAICompatClient),
            ("mistral", OpenAICompatClient),
            ("deepseek", OpenAICompatClient),
            ("anthropic", AnthropicChatClient),
            ("gemini", GeminiChatClient),
            ("watsonx", WatsonxChatClient),
        ],
    )
    def test_provider_classes(self, provider, cls):
        client = create_chat_client(provider, config_with_keys())

        assert isinstance(client, cls)
        assert client.provider == provider
        assert client.supports_tools is is_openai_compatible(provider)

    def test_provider_id_case_insensitive(self):
        assert create_chat_client(" OpenAI ", config_with_keys()).provider == "openai"

    def test_request_overrides_config(self):
        client = create_chat_client(
            "gemini", GatewayConfig(), api_key="req-key", base_url="https://proxy.test/"
        )

        assert client.base_url == "https://proxy.test"
        assert client._api_key == "req-key"

    @pytest.mark.parametrize("provider", ["openai", "anthropic", "watsonx"])
    def test_tenant_set_at_construction(self, provider):
        client = create_chat_client(provider, config_with_keys(), tenant="acme")

        assert client.tenant == "acme"

    def test_unsupported_provider(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_chat_client("cohere", config_with_keys())

        assert exc_info.value.kind == "unsupported_provider"
        assert exc_info.value.status == 400

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_chat_client("openai", GatewayConfig())

        assert exc_info.value.kind == "missing_api_key"

    def test_missing_base(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_chat_client("mistral", config_with_keys(mistral={"base_url": ""}))

        assert exc_info.value.kind == "missing_base"

    def test_watsonx_requires_project(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_chat_client("watsonx", config_with_keys(watsonx={"project_id": None}))

        assert exc_info.value.kind == "missing_project"
