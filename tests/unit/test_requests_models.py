# tests/unit/test_requests_models.py
"""Tests for request models accepting flat keys and the UI's settings object."""

import pytest
from pydantic import ValidationError

from maximo_gateway.models.requests import (
    AgentChatRequest,
    MaximoQueryRequest,
    MaximoRawRequest,
    TraceQuery,
)


class TestAgentChatRequest:
    def test_camel_case_keys(self):
        request = AgentChatRequest.model_validate(
            {
                "provider": "mistral",
                "model": "mistral-small-latest",
                "systemPrompt": "Be brief",
                "userText": "hi",
                "toolsEnabled": True,
                "toolRegistryUrl": "http://mcp:8081/mcp",
                "apiKey": "k",
                "baseUrl": "https://proxy.test",
            }
        )

        assert request.system_prompt == "Be brief"
        assert request.user_text == "hi"
        assert request.tools_enabled is True
        assert request.tool_registry_url == "http://mcp:8081/mcp"
        assert request.api_key == "k"
        assert request.base_url == "https://proxy.test"

    def test_defaults(self):
        request = AgentChatRequest.model_validate({"text": "hi"})

        assert request.provider == "openai"
        assert request.temperature is None
        assert request.tools_enabled is None

    def test_settings_lifted(self):
        request = AgentChatRequest.model_validate(
            {
                "provider": "deepseek",
                "userText": "hi",
                "settings": {
                    "mcp": {"enableTools": True, "url": "http://mcp:8081/mcp"},
                    "maximo": {"defaultTenant": "plant-a"},
                    "secrets": {"deepseek_key": "ds-key", "deepseek_base": "https://ds.test"},
                },
            }
        )

        assert request.tools_enabled is True
        assert request.tool_registry_url == "http://mcp:8081/mcp"
        assert request.tenant == "plant-a"
        assert request.api_key == "ds-key"
        assert request.base_url == "https://ds.test"

    def test_flat_values_win_over_settings(self):
        request = AgentChatRequest.model_validate(
            {
                "userText": "hi",
                "toolsEnabled": False,
                "tenant": "flat",
                "settings": {"mcp": {"enableTools": True}, "maximo_tenant": "nested"},
            }
        )

        assert request.tools_enabled is False
        assert request.tenant == "flat"

    def test_temperature_bounds(self):
        with pytest.raises(ValidationError):
            AgentChatRequest.model_validate({"text": "hi", "temperature": 3})


class TestTraceQuery:
    def test_string_limit_coerced(self):
        assert TraceQuery.model_validate({"limit": "20"}).limit == 20

    def test_bad_order(self):
        with pytest.raises(ValidationError):
            TraceQuery(order="sideways")

    def test_negative_limit(self):
        with pytest.raises(ValidationError):
            TraceQuery(limit=-1)


class TestMaximoRequests:
    def test_query_settings_lifted(self):
        request = MaximoQueryRequest.model_validate(
            {
                "text": "show me all assets",
                "settings": {
                    "maximo": {
                        "baseUrl": "https://mx.test",
                        "apiKey": "mk",
                        "defaultSite": "BEDFORD",
                        "objectStructure": "mxapiasset",
                        "defaultTenant": "plant-a",
                    }
                },
            }
        )

        assert request.base_url == "https://mx.test"
        assert request.api_key == "mk"
        assert request.site == "BEDFORD"
        assert request.object_structure == "mxapiasset"
        assert request.tenant == "plant-a"

    def test_query_legacy_flat_settings(self):
        request = MaximoQueryRequest.model_validate(
            {"text": "x", "settings": {"maximo_url": "https://mx.test", "default_siteid": "S1"}}
        )

        assert request.base_url == "https://mx.test"
        assert request.site == "S1"

    def test_raw_aliases(self):
        request = MaximoRawRequest.model_validate(
            {"os": "mxapiwo", "orderBy": "wonum", "pageSize": "5", "settings": {"maximo": {"defaultSite": "S"}}}
        )

        assert request.object_structure == "mxapiwo"
        assert request.order_by == "wonum"
        assert request.page_size == "5"
        assert request.method == "GET"
