"""
Pydantic request models for the exposed operations.

The chat UI sends camelCase keys and a nested "settings" object; both the flat
keys and the UI's settings layout are accepted.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


def _dig(data: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


class AgentChatRequest(BaseModel):
    """Input of the orchestration entry point."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    provider: str = Field(default="openai")
    model: str = Field(default="")
    system_prompt: str = Field(
        default="", validation_alias=AliasChoices("system_prompt", "systemPrompt", "system")
    )
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    user_text: str = Field(
        default="", validation_alias=AliasChoices("user_text", "userText", "text")
    )
    tenant: str | None = None
    tools_enabled: bool | None = Field(
        default=None, validation_alias=AliasChoices("tools_enabled", "toolsEnabled", "enableTools")
    )
    tool_registry_url: str | None = Field(
        default=None, validation_alias=AliasChoices("tool_registry_url", "toolRegistryUrl")
    )
    api_key: str | None = Field(default=None, validation_alias=AliasChoices("api_key", "apiKey"))
    base_url: str | None = Field(default=None, validation_alias=AliasChoices("base_url", "baseUrl"))

    @model_validator(mode="before")
    @classmethod
    def _merge_settings(cls, data: Any) -> Any:
        """Lift values out of the UI's nested settings object when not given flat."""
        if not isinstance(data, dict) or not isinstance(data.get("settings"), dict):
            return data
        settings = data["settings"]
        provider = str(data.get("provider") or "openai").strip().lower()
        secrets = settings.get("secrets")
        if not isinstance(secrets, dict):
            secrets = settings

        lifted = {
            ("tools_enabled", "toolsEnabled", "enableTools"): _dig(settings, "mcp", "enableTools"),
            ("tool_registry_url", "toolRegistryUrl"): _dig(settings, "mcp", "url"),
            ("tenant",): _dig(settings, "maximo", "defaultTenant") or settings.get("maximo_tenant"),
            ("api_key", "apiKey"): secrets.get(f"{provider}_key"),
            ("base_url", "baseUrl"): secrets.get(f"{provider}_base"),
        }
        merged = dict(data)
        for names, value in lifted.items():
            given = any(merged.get(name) not in (None, "") for name in names)
            if value not in (None, "") and not given:
                merged[names[0]] = value
        return merged


class TraceQuery(BaseModel):
    """Input of the trace read endpoint."""

    model_config = ConfigDict(extra="ignore")

    limit: int | None = Field(default=None, ge=0)
    kind: str | None = None
    order: str = Field(default="asc", pattern="^(asc|desc)$")


class _MaximoRequest(BaseModel):
    """Shared Maximo request fields; values may come from the UI's settings.maximo."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tenant: str | None = None
    object_structure: str | None = Field(
        default=None, validation_alias=AliasChoices("object_structure", "objectStructure", "os")
    )
    base_url: str | None = Field(default=None, validation_alias=AliasChoices("base_url", "baseUrl"))
    api_key: str | None = Field(default=None, validation_alias=AliasChoices("api_key", "apiKey"))

    @model_validator(mode="before")
    @classmethod
    def _merge_settings(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("settings"), dict):
            return data
        settings = data["settings"]
        maximo = settings.get("maximo") if isinstance(settings.get("maximo"), dict) else {}

        lifted = {
            ("base_url", "baseUrl"): maximo.get("baseUrl") or settings.get("maximo_url"),
            ("api_key", "apiKey"): maximo.get("apiKey") or settings.get("maximo_apikey"),
            ("site", "defaultSite"): maximo.get("defaultSite") or settings.get("default_siteid"),
            ("object_structure", "objectStructure", "os"): (
                maximo.get("objectStructure") or settings.get("maximo_os")
            ),
            ("tenant",): maximo.get("defaultTenant") or settings.get("maximo_tenant"),
        }
        merged = dict(data)
        for names, value in lifted.items():
            given = any(merged.get(name) not in (None, "") for name in names)
            if value not in (None, "") and not given:
                merged[names[0]] = value
        return merged


class MaximoQueryRequest(_MaximoRequest):
    """Quick natural-language Maximo query."""

    text: str = ""
    site: str | None = Field(default=None, validation_alias=AliasChoices("site", "defaultSite"))


class MaximoRawRequest(_MaximoRequest):
    """Raw OSLC call built by the UI's REST builder."""

    method: str = "GET"
    where: str = ""
    select: str = ""
    order_by: str = Field(default="", validation_alias=AliasChoices("order_by", "orderBy"))
    page_size: str = Field(default="", validation_alias=AliasChoices("page_size", "pageSize"))
    body: str = ""
