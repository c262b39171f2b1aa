"""Maximo backend access: tenants, OSLC helpers, REST client."""

from .client import MaximoClient, MaximoResponse
from .oslc import OslcQuery, extract_rows, map_quick_query, quote_where_value, tabulate
from .tenants import TenantContext, normalize_api_root, resolve_tenant

__all__ = [
    "MaximoClient",
    "MaximoResponse",
    "OslcQuery",
    "TenantContext",
    "extract_rows",
    "map_quick_query",
    "normalize_api_root",
    "quote_where_value",
    "resolve_tenant",
    "tabulate",
]
