"""Common base for provider chat clients."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from maximo_gateway.errors import ProviderCallError
from maximo_gateway.registry.types import ToolDescriptor
from maximo_gateway.trace import TraceKind, TraceSink

from .types import ChatReply, ChatRequest

logger = logging.getLogger(__name__)


class ChatClient(ABC):
    """
    One LLM provider behind the canonical complete() contract.

    Subclasses never retry: a failure raises ProviderCallError and the caller
    decides what to do with the run.
    """

    #: Whether the provider participates in tool orchestration
    supports_tools: bool = False

    def __init__(
        self,
        provider: str,
        api_key: str,
        base_url: str,
        timeout: float = 60.0,
        trace: TraceSink | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        tenant: str = "",
    ) -> None:
        self.provider = provider
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._trace = trace
        self._transport = transport
        self.tenant = tenant

    @abstractmethod
    async def complete(
        self, request: ChatRequest, tools: list[ToolDescriptor] | None = None
    ) -> ChatReply:
        """
        Send the conversation and return the normalized reply.

        Raises:
            ProviderCallError: On non-2xx status, malformed JSON, or transport failure
        """

    def _record(self, kind: TraceKind, payload: Any, **meta: Any) -> None:
        if self._trace is not None:
            self._trace.append(
                kind, payload, meta={"provider": self.provider, **meta}, tenant=self.tenant
            )

    async def _post_json(
        self,
        url: str,
        body: dict,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict:
        """POST a JSON body with httpx and return the decoded JSON object."""
        self._record(TraceKind.TX_PROVIDER, body, url=url)
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as http:
                response = await http.post(
                    url,
                    content=json.dumps(body),
                    headers={"content-type": "application/json", **(headers or {})},
                    params=params,
                )
        except httpx.TimeoutException:
            raise ProviderCallError(self.provider, f"timed out after {self.timeout}s") from None
        except httpx.HTTPError as e:
            raise ProviderCallError(self.provider, f"{type(e).__name__}: {e}") from e

        return self._read_reply(response, url)

    def _rejected(self, response: httpx.Response, url: str) -> ProviderCallError:
        """Record a non-2xx reply and build the error carrying its detail."""
        raw = response.text
        self._record(TraceKind.RX_PROVIDER, raw, url=url, status=response.status_code)
        return ProviderCallError(
            self.provider,
            _error_detail(_json_or_none(response), raw),
            upstream_status=response.status_code,
        )

    def _read_reply(self, response: httpx.Response, url: str) -> dict:
        """
        Record the reply and return its body as a JSON object.

        Raises:
            ProviderCallError: Non-2xx status, non-JSON body, or JSON that is not an object
        """
        if not response.is_success:
            raise self._rejected(response, url)
        raw = response.text
        self._record(TraceKind.RX_PROVIDER, raw, url=url, status=response.status_code)
        data = _json_or_none(response)
        if not isinstance(data, dict):
            raise ProviderCallError(
                self.provider,
                f"expected a JSON object, got: {raw}",
                upstream_status=response.status_code,
            )
        return data


def _json_or_none(response: httpx.Response) -> Any:
    """Decoded body for JSON content types, None for anything else or bad JSON."""
    if "application/json" not in response.headers.get("content-type", "").lower():
        return None
    try:
        return json.loads(response.text)
    except ValueError:
        return None


def _error_detail(data: Any, raw: str) -> str:
    """Prefer the provider's error message, fall back to the raw body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return json.dumps(data)
    return raw or "empty response"
