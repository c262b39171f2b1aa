"""
Pydantic configuration models for maximo-gateway.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

OPENAI_COMPATIBLE_PROVIDERS = ("openai", "mistral", "deepseek")
SUPPORTED_PROVIDERS = OPENAI_COMPATIBLE_PROVIDERS + ("anthropic", "gemini", "watsonx")


class ProviderConfig(BaseModel):
    """Credentials and endpoint for a single LLM provider."""

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(default=None, description="Provider API key or bearer token")
    base_url: str = Field(default="", description="Provider API root (no trailing /v1)")
    default_model: str = Field(default="", description="Model used when a request names none")
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")
    project_id: str | None = Field(
        default=None, description="watsonx project id (ignored by other providers)"
    )


_PROVIDER_DEFAULTS: dict[str, tuple[str, str]] = {
    "openai": ("https://api.openai.com", "gpt-4o-mini"),
    "mistral": ("https://api.mistral.ai", "mistral-small-latest"),
    "deepseek": ("https://api.deepseek.com", "deepseek-chat"),
    "anthropic": ("https://api.anthropic.com", "claude-3-5-sonnet-latest"),
    "gemini": ("https://generativelanguage.googleapis.com", "gemini-1.5-flash"),
    "watsonx": ("https://us-south.ml.cloud.ibm.com", "ibm/granite-13b-chat-v2"),
}


def _provider(name: str) -> ProviderConfig:
    base_url, model = _PROVIDER_DEFAULTS[name]
    return ProviderConfig(base_url=base_url, default_model=model)


class ProvidersConfig(BaseModel):
    """Per-provider settings keyed by provider id."""

    model_config = ConfigDict(extra="ignore")

    openai: ProviderConfig = Field(default_factory=lambda: _provider("openai"))
    mistral: ProviderConfig = Field(default_factory=lambda: _provider("mistral"))
    deepseek: ProviderConfig = Field(default_factory=lambda: _provider("deepseek"))
    anthropic: ProviderConfig = Field(default_factory=lambda: _provider("anthropic"))
    gemini: ProviderConfig = Field(default_factory=lambda: _provider("gemini"))
    watsonx: ProviderConfig = Field(default_factory=lambda: _provider("watsonx"))

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        """A partial provider section keeps the built-in base URL and model."""
        if not isinstance(data, dict):
            return data
        merged = dict(data)
        for name, (base_url, model) in _PROVIDER_DEFAULTS.items():
            section = merged.get(name)
            if isinstance(section, dict):
                merged[name] = {"base_url": base_url, "default_model": model, **section}
        return merged

    def get(self, provider: str) -> ProviderConfig | None:
        """Look up a provider by id, None if unknown."""
        if provider not in SUPPORTED_PROVIDERS:
            return None
        return getattr(self, provider)


class RegistryConfig(BaseModel):
    """Tool-registry (MCP) server configuration."""

    model_config = ConfigDict(extra="ignore")

    url: str | None = Field(default=None, description="Tool-registry base URL (None = no tools)")
    enable_tools: bool = Field(default=False, description="Enable tool orchestration")
    timeout: float = Field(default=30.0, gt=0, description="Tool invocation timeout in seconds")
    list_timeout: float = Field(default=10.0, gt=0, description="Tool list fetch timeout in seconds")


class OrchestrationConfig(BaseModel):
    """Tool-calling loop configuration."""

    model_config = ConfigDict(extra="ignore")

    max_iterations: int = Field(
        default=6,
        ge=1,
        le=50,
        description="Maximum completion/tool rounds before the run is aborted",
    )
    parallel_tool_calls: bool = Field(
        default=True, description="Execute a batch of tool calls concurrently"
    )
    default_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_user_text: int = Field(default=20_000, ge=1, description="Maximum user text length")


class TraceConfig(BaseModel):
    """Trace buffer configuration."""

    model_config = ConfigDict(extra="ignore")

    capacity: int = Field(default=500, ge=1, description="Events kept before oldest are evicted")
    default_limit: int = Field(default=200, ge=1, description="Events returned when no limit given")
    max_payload_chars: int = Field(
        default=2000, ge=1, description="String payloads longer than this are truncated"
    )


class TenantConfig(BaseModel):
    """Connection details for one Maximo tenant."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    base_url: str | None = Field(default=None, alias="baseUrl")
    api_key: str | None = Field(default=None, alias="apiKey")
    user: str | None = None
    password: str | None = None


class MaximoConfig(BaseModel):
    """Maximo backend configuration."""

    model_config = ConfigDict(extra="ignore")

    default_tenant: str = Field(default="default", description="Tenant used when none is given")
    default_site: str | None = Field(default=None, description="Default siteid filter")
    object_structure: str = Field(default="mxapiasset", description="Default object structure")
    tenants: dict[str, TenantConfig] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0, description="Maximo request timeout in seconds")


class ServerConfig(BaseModel):
    """HTTP server bind address."""

    model_config = ConfigDict(extra="ignore")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class GatewayConfig(BaseModel):
    """Root configuration for maximo-gateway."""

    model_config = ConfigDict(extra="ignore")

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    orchestration: OrchestrationConfig = Field(default_factory=OrchestrationConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    maximo: MaximoConfig = Field(default_factory=MaximoConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
