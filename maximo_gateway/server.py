"""
FastMCP server instance with tool registration and the chat UI's REST routes.

CRITICAL: configure_logging() is called first to prevent stdout pollution.
All logging goes to stderr as JSON.
"""

# Configure logging FIRST before any other imports
from maximo_gateway.logging_config import configure_logging

configure_logging()

# Now safe to import everything else
import json
import logging
from collections.abc import Awaitable, Callable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from maximo_gateway.config.loader import load_config
from maximo_gateway.config.schema import GatewayConfig
from maximo_gateway.errors import ConfigurationError, GatewayError, status_for
from maximo_gateway.models.requests import (
    AgentChatRequest,
    MaximoQueryRequest,
    MaximoRawRequest,
    TraceQuery,
)
from maximo_gateway.tools.agent_chat import agent_chat as _agent_chat
from maximo_gateway.tools.list_models import list_models as _list_models
from maximo_gateway.tools.maximo_query import maximo_query as _maximo_query
from maximo_gateway.tools.maximo_query import maximo_raw as _maximo_raw
from maximo_gateway.tools.read_trace import read_trace as _read_trace
from maximo_gateway.trace import TraceSink

logger = logging.getLogger(__name__)

# Create FastMCP instance
mcp = FastMCP("maximo-gateway")

# Load configuration
_config = load_config()
logger.info(
    f"Loaded configuration: tools={_config.registry.enable_tools} "
    f"registry={_config.registry.url or '-'} tenant={_config.maximo.default_tenant}"
)

# Process-scoped trace buffer shared by every request
_trace = TraceSink(
    capacity=_config.trace.capacity,
    max_payload_chars=_config.trace.max_payload_chars,
)


def get_config() -> GatewayConfig:
    return _config


def get_trace() -> TraceSink:
    return _trace


def parse_request(model: type[BaseModel], data: dict) -> BaseModel:
    """
    Validate a request body against a request model.

    Raises:
        ConfigurationError: Body does not match the model
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise ConfigurationError(f"Invalid {field}: {first.get('msg', 'invalid value')}") from None


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ConfigurationError("Request body is not valid JSON") from None
    if not isinstance(body, dict):
        raise ConfigurationError("Request body must be a JSON object")
    return body


async def _respond(
    handler: Callable[[], Awaitable[dict]],
    status: Callable[[dict], int] = status_for,
) -> JSONResponse:
    """Run a route handler, rendering gateway errors as {error, detail} with their status."""
    try:
        payload = await handler()
    except GatewayError as e:
        logger.warning(f"{e.kind}: {e.detail}")
        return JSONResponse(e.to_payload(), status_code=e.status)
    except Exception as e:
        logger.exception("Unhandled error in REST route")
        return JSONResponse({"error": "agent_failed", "detail": str(e)}, status_code=500)
    return JSONResponse(payload, status_code=status(payload))


# --- REST routes -------------------------------------------------------------


@mcp.custom_route("/healthz", methods=["GET"])
async def healthz(request: Request) -> JSONResponse:
    return JSONResponse({"ok": True})


@mcp.custom_route("/api/agent/chat", methods=["POST"])
async def agent_chat_route(request: Request) -> JSONResponse:
    async def handle() -> dict:
        chat_request = parse_request(AgentChatRequest, await _json_body(request))
        return await _agent_chat(chat_request, _config, _trace)

    return await _respond(handle)


@mcp.custom_route("/api/logs", methods=["GET"])
async def logs_route(request: Request) -> JSONResponse:
    async def handle() -> dict:
        query = parse_request(TraceQuery, dict(request.query_params))
        return await _read_trace(query, _trace, _config.trace)

    return await _respond(handle)


@mcp.custom_route("/api/models", methods=["POST"])
async def models_route(request: Request) -> JSONResponse:
    async def handle() -> dict:
        body = await _json_body(request)
        return await _list_models(
            str(body.get("provider") or "openai"),
            _config,
            api_key=body.get("apiKey") or body.get("api_key"),
        )

    return await _respond(handle)


@mcp.custom_route("/api/maximo/query", methods=["POST"])
async def maximo_query_route(request: Request) -> JSONResponse:
    async def handle() -> dict:
        query = parse_request(MaximoQueryRequest, await _json_body(request))
        return await _maximo_query(query, _config, _trace)

    # A failed Maximo reply keeps Maximo's own status
    return await _respond(
        handle, status=lambda payload: payload.get("status") or status_for(payload)
    )


@mcp.custom_route("/api/maximo/raw", methods=["POST"])
async def maximo_raw_route(request: Request) -> JSONResponse:
    async def handle() -> dict:
        raw = parse_request(MaximoRawRequest, await _json_body(request))
        return await _maximo_raw(raw, _config, _trace)

    # The UI shows Maximo's own status for raw calls
    return await _respond(handle, status=lambda payload: payload["status"])


# --- MCP tools ---------------------------------------------------------------


@mcp.tool()
async def agent_chat(
    user_text: str,
    provider: str = "openai",
    model: str = "",
    system_prompt: str = "",
    temperature: float | None = None,
    tenant: str | None = None,
    tools_enabled: bool | None = None,
) -> dict:
    """Send one message to an LLM provider, running Maximo registry tools it asks for."""
    try:
        chat_request = parse_request(
            AgentChatRequest,
            {
                "user_text": user_text,
                "provider": provider,
                "model": model,
                "system_prompt": system_prompt,
                "temperature": temperature,
                "tenant": tenant,
                "tools_enabled": tools_enabled,
            },
        )
    except ConfigurationError as e:
        raise ToolError(e.detail)
    return await _agent_chat(chat_request, _config, _trace)


@mcp.tool()
async def read_trace(limit: int | None = None, kind: str | None = None, order: str = "asc") -> dict:
    """Read recent gateway trace events (provider, registry, and Maximo traffic)."""
    try:
        query = parse_request(TraceQuery, {"limit": limit, "kind": kind, "order": order})
        return await _read_trace(query, _trace, _config.trace)
    except GatewayError as e:
        raise ToolError(e.detail)


@mcp.tool()
async def list_models(provider: str = "openai") -> dict:
    """List model ids available for a provider."""
    try:
        return await _list_models(provider, _config)
    except GatewayError as e:
        raise ToolError(e.detail)


@mcp.tool()
async def maximo_query(
    text: str,
    tenant: str | None = None,
    site: str | None = None,
    object_structure: str | None = None,
) -> dict:
    """Run a quick Maximo query such as "show me all assets" or "open work orders"."""
    try:
        query = parse_request(
            MaximoQueryRequest,
            {"text": text, "tenant": tenant, "site": site, "object_structure": object_structure},
        )
        return await _maximo_query(query, _config, _trace)
    except GatewayError as e:
        raise ToolError(e.detail)


logger.info("MCP server initialized with 4 tools and 6 routes")
