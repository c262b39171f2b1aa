"""Chat client for Anthropic's messages API (content-block replies, no tools)."""

import logging

import anthropic
import httpx

from maximo_gateway.errors import ProviderCallError
from maximo_gateway.registry.types import ToolDescriptor
from maximo_gateway.trace import TraceKind, TraceSink

from .base import ChatClient
from .replies import parse_reply
from .types import ChatReply, ChatRequest

logger = logging.getLogger(__name__)

MAX_TOKENS = 1024


class AnthropicChatClient(ChatClient):
    """Async client using AsyncAnthropic with SDK retries disabled."""

    supports_tools = False

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
        super().__init__(
            provider,
            api_key,
            base_url,
            timeout=timeout,
            trace=trace,
            transport=transport,
            tenant=tenant,
        )
        self._client: "anthropic.AsyncAnthropic | None" = None

    @property
    def client(self) -> "anthropic.AsyncAnthropic":
        """Lazy-loaded Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=httpx.AsyncClient(transport=self._transport)
                if self._transport
                else None,
            )
        return self._client

    async def complete(
        self, request: ChatRequest, tools: list[ToolDescriptor] | None = None
    ) -> ChatReply:
        messages = [
            {"role": m.role, "content": m.content}
            for m in request.messages
            if m.role in ("user", "assistant") and m.content
        ]
        kwargs: dict = {
            "model": request.model,
            "max_tokens": MAX_TOKENS,
            "temperature": request.temperature,
            "messages": messages,
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt

        url = f"{self.base_url}/v1/messages"
        self._record(TraceKind.TX_PROVIDER, kwargs, url=url)
        try:
            raw = await self.client.messages.with_raw_response.create(**kwargs)
        except anthropic.APIStatusError as e:
            raise self._rejected(e.response, url) from e
        except anthropic.APIError as e:
            self._record(TraceKind.RX_PROVIDER, str(e), url=url, status=0)
            raise ProviderCallError(self.provider, f"{type(e).__name__}: {e}") from e

        data = self._read_reply(raw.http_response, url)
        return parse_reply(self.provider, data)
