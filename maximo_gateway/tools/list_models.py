"""
list_models tool implementation.

Thin wrapper over the model catalog that validates the provider id.
"""

from maximo_gateway.config.schema import SUPPORTED_PROVIDERS, GatewayConfig
from maximo_gateway.errors import ConfigurationError
from maximo_gateway.llm.catalog import list_models as _catalog_list
from maximo_gateway.models.responses import ModelsResponse


async def list_models(provider: str, config: GatewayConfig, api_key: str | None = None) -> dict:
    """
    List model ids for a provider.

    Raises:
        ConfigurationError: Unknown provider
    """
    provider = (provider or "openai").strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(f"Unsupported provider: {provider}", kind="unsupported_provider")
    result = await _catalog_list(provider, config, api_key=api_key)
    return ModelsResponse(**result).model_dump(exclude_none=True)
