"""MaximoClient - OSLC REST calls against one tenant's /maximo/api/os endpoints."""

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from maximo_gateway.errors import MaximoCallError
from maximo_gateway.trace import TraceKind, TraceSink
from maximo_gateway.validation.sanitize import mask_headers

from .oslc import OslcQuery
from .tenants import TenantContext

logger = logging.getLogger(__name__)

BODY_PREVIEW_CHARS = 2000


@dataclass
class MaximoResponse:
    """Raw outcome of one Maximo request, with a masked request trace."""

    method: str
    url: str
    request_headers: dict[str, str]
    request_body: str
    status: int
    text: str
    data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def trace(self) -> dict:
        """Request/response summary safe to return to the UI."""
        return {
            "request": {
                "method": self.method,
                "url": self.url,
                "headers": mask_headers(self.request_headers),
                "body": self.request_body,
            },
            "response": {"status": self.status, "body": self.text[:BODY_PREVIEW_CHARS]},
        }


class MaximoClient:
    """Async client bound to one resolved tenant."""

    def __init__(
        self,
        tenant: TenantContext,
        timeout: float = 30.0,
        trace: TraceSink | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.tenant = tenant
        self.timeout = timeout
        self._trace = trace
        self._transport = transport

    def auth_headers(self) -> dict[str, str]:
        key = self.tenant.api_key
        return {
            "accept": "application/json",
            "apikey": key,
            "x-api-key": key,
            "authorization": f"Apikey {key}",
        }

    def os_url(self, object_structure: str) -> str:
        return f"{self.tenant.base_api_url}/os/{quote(object_structure.strip(), safe='')}"

    async def query(self, query: OslcQuery) -> MaximoResponse:
        """GET an object structure with OSLC parameters."""
        return await self.request("GET", query.object_structure, params=query.to_params())

    async def request(
        self,
        method: str,
        object_structure: str,
        params: dict[str, str] | None = None,
        body: str = "",
    ) -> MaximoResponse:
        """
        Send one request to /os/<object_structure>.

        Raises:
            MaximoCallError: On timeout or transport failure (HTTP errors are returned)
        """
        method = method.upper()
        url = str(httpx.URL(self.os_url(object_structure), params=params or {}))
        headers = self.auth_headers()
        content = None
        if method not in ("GET", "HEAD"):
            headers["content-type"] = "application/json"
            content = body or "{}"

        self._record(TraceKind.TX_MAXIMO, {"method": method, "url": url, "body": content or ""})
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as http:
                response = await http.request(method, url, headers=headers, content=content)
        except httpx.TimeoutException:
            raise MaximoCallError(f"Maximo timed out after {self.timeout}s") from None
        except httpx.HTTPError as e:
            raise MaximoCallError(f"{type(e).__name__}: {e}") from e

        text = response.text
        data = None
        if "application/json" in response.headers.get("content-type", "").lower():
            try:
                data = json.loads(text)
            except ValueError:
                data = None
        self._record(TraceKind.RX_MAXIMO, text, status=response.status_code)
        if not response.is_success:
            logger.warning(f"Maximo {method} {object_structure} returned {response.status_code}")

        return MaximoResponse(
            method=method,
            url=url,
            request_headers=headers,
            request_body=content or "",
            status=response.status_code,
            text=text,
            data=data,
        )

    def _record(self, kind: TraceKind, payload: Any, **meta: Any) -> None:
        if self._trace is not None:
            self._trace.append(kind, payload, meta=meta, tenant=self.tenant.id)
