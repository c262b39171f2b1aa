"""Tenant registry lookups and Maximo API root normalization."""

import logging
import re
from dataclasses import dataclass

from maximo_gateway.config.schema import MaximoConfig
from maximo_gateway.errors import ConfigurationError

logger = logging.getLogger(__name__)

_API_SUFFIX = re.compile(r"/api/?$")
_MAXIMO_SUFFIX = re.compile(r"/maximo/?$")


def normalize_api_root(base_url: str | None) -> str:
    """
    Turn a Maximo URL into its REST API root.

    "https://host"             -> "https://host/maximo/api"
    "https://host/maximo"      -> "https://host/maximo/api"
    "https://host/maximo/api/" -> "https://host/maximo/api"

    Returns "" for empty input.
    """
    base = (base_url or "").strip().rstrip("/")
    if not base:
        return ""
    if _API_SUFFIX.search(base):
        return base
    if _MAXIMO_SUFFIX.search(base):
        return f"{base}/api"
    return f"{base}/maximo/api"


@dataclass(frozen=True)
class TenantContext:
    """Resolved connection details for one request."""

    id: str
    base_api_url: str
    api_key: str
    user: str | None = None
    password: str | None = None


def resolve_tenant(
    tenant_id: str | None,
    config: MaximoConfig,
    base_url: str | None = None,
    api_key: str | None = None,
) -> TenantContext:
    """
    Resolve a tenant id against the configured registry.

    Unknown ids fall back to the "default" tenant. base_url/api_key override the
    registry entry (the UI may send its own Maximo settings).

    Raises:
        ConfigurationError: No usable base URL or API key for the tenant
    """
    tenant_id = (tenant_id or "").strip() or config.default_tenant
    entry = config.tenants.get(tenant_id) or config.tenants.get("default")

    resolved_base = base_url or (entry.base_url if entry else None)
    resolved_key = api_key or (entry.api_key if entry else None)
    api_root = normalize_api_root(resolved_base)
    if not api_root:
        raise ConfigurationError(
            f"Tenant is not configured: {tenant_id} (missing Maximo base URL)",
            kind="tenant_not_configured",
        )
    if not resolved_key:
        raise ConfigurationError(
            f"Tenant is not configured: {tenant_id} (missing Maximo API key)",
            kind="tenant_not_configured",
        )

    return TenantContext(
        id=tenant_id,
        base_api_url=api_root,
        api_key=resolved_key,
        user=entry.user if entry else None,
        password=entry.password if entry else None,
    )
