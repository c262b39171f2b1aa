"""
maximo_query / maximo_raw tool implementations.

Direct Maximo access used by the UI alongside the chat: quick queries mapped
from a short prompt, and raw OSLC calls built field by field.
"""

import logging

import httpx

from maximo_gateway.config.schema import GatewayConfig
from maximo_gateway.errors import ConfigurationError
from maximo_gateway.maximo.client import MaximoClient, MaximoResponse
from maximo_gateway.maximo.oslc import OslcQuery, extract_rows, map_quick_query, tabulate
from maximo_gateway.maximo.tenants import resolve_tenant
from maximo_gateway.models.requests import MaximoQueryRequest, MaximoRawRequest
from maximo_gateway.models.responses import MaximoQueryResponse, MaximoRawResponse, TableResult
from maximo_gateway.trace import TraceSink

logger = logging.getLogger(__name__)

_ALLOWED_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE")


def _client(
    request,
    config: GatewayConfig,
    trace: TraceSink | None,
    transport: httpx.AsyncBaseTransport | None,
) -> MaximoClient:
    tenant = resolve_tenant(
        request.tenant,
        config.maximo,
        base_url=request.base_url,
        api_key=request.api_key,
    )
    return MaximoClient(tenant, timeout=config.maximo.timeout, trace=trace, transport=transport)


def _failure(response: MaximoResponse) -> dict:
    return {
        "error": "maximo_failed",
        "detail": f"Maximo returned {response.status}",
        "status": response.status,
        "trace": response.trace(),
    }


async def maximo_query(
    request: MaximoQueryRequest,
    config: GatewayConfig,
    trace: TraceSink | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """
    Run a quick query ("show me all assets", "open work orders", ...).

    Returns:
        MaximoQueryResponse as dict, or {"error": "maximo_failed", ...} on a non-2xx reply

    Raises:
        ConfigurationError: Tenant not configured
        MaximoCallError:    Maximo unreachable
    """
    if not request.text.strip():
        raise ConfigurationError("Query text cannot be empty")

    object_structure = request.object_structure or config.maximo.object_structure
    site = request.site or config.maximo.default_site
    query = map_quick_query(request.text, site, object_structure)

    response = await _client(request, config, trace, transport).query(query)
    if not response.ok:
        return _failure(response)

    rows = extract_rows(response.data)
    columns, table = tabulate(rows, query.columns)
    logger.info(f"Maximo quick query on {object_structure}: {len(rows)} row(s)")
    return MaximoQueryResponse(
        summary=f"Retrieved {len(rows)} row(s) from Maximo.",
        table=TableResult(title=f"Results · {object_structure}", columns=columns, rows=table),
        trace=response.trace(),
    ).model_dump()


async def maximo_raw(
    request: MaximoRawRequest,
    config: GatewayConfig,
    trace: TraceSink | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """
    Send one raw OSLC request and return its trace.

    Returns:
        MaximoRawResponse as dict ("status" mirrors Maximo)

    Raises:
        ConfigurationError: Tenant not configured or unsupported method
        MaximoCallError:    Maximo unreachable
    """
    method = (request.method or "GET").strip().upper()
    if method not in _ALLOWED_METHODS:
        raise ConfigurationError(f"Unsupported HTTP method: {method}")

    object_structure = request.object_structure or config.maximo.object_structure
    query = OslcQuery(
        object_structure,
        where=request.where.strip(),
        select=request.select.strip(),
        order_by=request.order_by.strip(),
        page_size=request.page_size.strip(),
    )
    client = _client(request, config, trace, transport)
    response = await client.request(
        method, object_structure, params=query.to_params(), body=request.body
    )

    return MaximoRawResponse(status=response.status, trace=response.trace()).model_dump()
