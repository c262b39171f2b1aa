"""Configuration system for maximo-gateway."""

from .loader import apply_env_overrides, get_config_path, load_config
from .schema import (
    OPENAI_COMPATIBLE_PROVIDERS,
    SUPPORTED_PROVIDERS,
    GatewayConfig,
    MaximoConfig,
    OrchestrationConfig,
    ProviderConfig,
    RegistryConfig,
    TenantConfig,
    TraceConfig,
)

__all__ = [
    "GatewayConfig",
    "ProviderConfig",
    "RegistryConfig",
    "OrchestrationConfig",
    "TraceConfig",
    "MaximoConfig",
    "TenantConfig",
    "OPENAI_COMPATIBLE_PROVIDERS",
    "SUPPORTED_PROVIDERS",
    "load_config",
    "apply_env_overrides",
    "get_config_path",
]
