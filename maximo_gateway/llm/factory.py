"""Factory for creating the chat client for a provider id."""

from maximo_gateway.config.schema import (
    OPENAI_COMPATIBLE_PROVIDERS,
    SUPPORTED_PROVIDERS,
    GatewayConfig,
)
from maximo_gateway.errors import ConfigurationError
from maximo_gateway.trace import TraceSink

from .anthropic_client import AnthropicChatClient
from .base import ChatClient
from .gemini import GeminiChatClient
from .openai_compat import OpenAICompatClient
from .watsonx import WatsonxChatClient


def is_openai_compatible(provider: str) -> bool:
    return provider in OPENAI_COMPATIBLE_PROVIDERS


def create_chat_client(
    provider: str,
    config: GatewayConfig,
    api_key: str | None = None,
    base_url: str | None = None,
    trace: TraceSink | None = None,
    tenant: str = "",
) -> ChatClient:
    """
    Create the chat client for provider, validating its configuration first.

    Args:
        provider: Provider id (openai, mistral, deepseek, anthropic, gemini, watsonx)
        config:   Root GatewayConfig
        api_key:  Per-request key overriding config
        base_url: Per-request base URL overriding config
        trace:    Sink for tx_provider/rx_provider events
        tenant:   Tenant id stamped on provider trace events

    Raises:
        ConfigurationError: Unknown provider, missing key, base URL, or watsonx project
    """
    provider = provider.strip().lower()
    provider_config = config.providers.get(provider)
    if provider_config is None:
        raise ConfigurationError(
            f"Provider not supported: {provider} (expected one of {', '.join(SUPPORTED_PROVIDERS)})",
            kind="unsupported_provider",
        )

    key = (api_key or provider_config.api_key or "").strip()
    base = (base_url or provider_config.base_url or "").strip().rstrip("/")
    if not key:
        raise ConfigurationError(f"Missing {provider} API key", kind="missing_api_key")
    if not base:
        raise ConfigurationError(f"Missing {provider} base URL", kind="missing_base")

    common = {"timeout": provider_config.timeout, "trace": trace, "tenant": tenant}
    if is_openai_compatible(provider):
        return OpenAICompatClient(provider, key, base, **common)
    if provider == "anthropic":
        return AnthropicChatClient(provider, key, base, **common)
    if provider == "gemini":
        return GeminiChatClient(provider, key, base, **common)

    project_id = (provider_config.project_id or "").strip()
    if not project_id:
        raise ConfigurationError(
            "Missing watsonx project id (providers.watsonx.project_id)", kind="missing_project"
        )
    return WatsonxChatClient(provider, key, base, project_id=project_id, **common)
