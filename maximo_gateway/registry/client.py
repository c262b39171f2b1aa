"""
RegistryClient - HTTP client for the tool-registry (MCP) server.

Two calls:
- GET  <registry>/tools?tenant=<id>  -> {"tools": [...]}
- POST <registry>/call {tool, args, tenant} -> tool-specific JSON

invoke() never raises for network or HTTP failures: it returns a failed ToolResult
so the orchestration loop can hand the failure to the model. It does not retry and
does not validate arguments against the tool schema.
"""

import json
import logging
from typing import Any

import httpx

from maximo_gateway.trace import TraceKind, TraceSink

from .schema import normalize_tools
from .types import ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


class RegistryClient:
    """Async client for one tool-registry base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        list_timeout: float = 10.0,
        trace: TraceSink | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize registry client.

        Args:
            base_url:     Registry root, e.g. "http://mcp-server:8081/mcp"
            timeout:      Per-invocation timeout in seconds
            list_timeout: Timeout for the tool list fetch in seconds
            trace:        Optional sink receiving tx_registry/rx_registry events
            transport:    Optional httpx transport (tests inject MockTransport)
        """
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.list_timeout = list_timeout
        self._trace = trace
        self._transport = transport

    def _http(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=self._transport)

    def _record(self, kind: TraceKind, payload: Any, meta: dict, tenant: str) -> None:
        if self._trace is not None:
            self._trace.append(kind, payload, meta=meta, tenant=tenant)

    async def list_tools(self, tenant: str) -> list[ToolDescriptor]:
        """
        Fetch and normalize the registry's tool list.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError:      If the body is not JSON
        """
        url = f"{self.base_url}/tools"
        self._record(TraceKind.TX_REGISTRY, {"method": "GET", "url": url}, {"op": "list"}, tenant)

        async with self._http(self.list_timeout) as http:
            response = await http.get(url, params={"tenant": tenant})
        self._record(
            TraceKind.RX_REGISTRY,
            response.text,
            {"op": "list", "status": response.status_code},
            tenant,
        )
        response.raise_for_status()

        data = response.json()
        raw_tools = data.get("tools") if isinstance(data, dict) else data
        tools = normalize_tools(raw_tools)
        logger.info(f"Registry {self.base_url}: {len(tools)} tool(s) for tenant={tenant}")
        return tools

    async def invoke(self, tool_name: str, arguments: dict, tenant: str) -> ToolResult:
        """
        Invoke one tool and return its canonical result.

        Args:
            tool_name: Registry tool name, e.g. "maximo.queryOS"
            arguments: Parsed argument object
            tenant:    Tenant id forwarded to the registry

        Returns:
            ToolResult; ok=False on timeout, transport failure, or non-2xx status
        """
        url = f"{self.base_url}/call"
        body = {"tool": tool_name, "args": arguments, "tenant": tenant}
        meta = {"op": "call", "tool": tool_name}

        try:
            content = json.dumps(body)
        except (TypeError, ValueError) as e:
            return ToolResult.failure("invalid_arguments", str(e), status=0)

        self._record(TraceKind.TX_REGISTRY, body, meta, tenant)
        try:
            async with self._http(self.timeout) as http:
                response = await http.post(
                    url, content=content, headers={"content-type": "application/json"}
                )
        except httpx.TimeoutException:
            logger.warning(f"Tool {tool_name} timed out after {self.timeout}s")
            result = ToolResult.failure(
                "registry_timeout", f"{tool_name} timed out after {self.timeout}s"
            )
        except httpx.HTTPError as e:
            logger.warning(f"Tool {tool_name} failed: {e!r}")
            result = ToolResult.failure("registry_unreachable", f"{type(e).__name__}: {e}")
        else:
            try:
                parsed: Any = response.json()
            except ValueError:
                parsed = response.text
            result = ToolResult(ok=response.is_success, status=response.status_code, body=parsed)
            if not result.ok:
                logger.warning(f"Tool {tool_name} returned HTTP {response.status_code}")

        self._record(
            TraceKind.RX_REGISTRY,
            result.body,
            {**meta, "status": result.status, "ok": result.ok},
            tenant,
        )
        return result
