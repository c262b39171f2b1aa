"""Chat client for the OpenAI-compatible family (OpenAI, Mistral, DeepSeek)."""

import logging

import httpx
import openai
from openai import AsyncOpenAI

from maximo_gateway.errors import ProviderCallError
from maximo_gateway.registry.schema import to_openai_tools
from maximo_gateway.registry.types import ToolDescriptor
from maximo_gateway.trace import TraceKind, TraceSink

from .base import ChatClient
from .replies import parse_reply
from .types import ChatReply, ChatRequest

logger = logging.getLogger(__name__)


def api_root(base_url: str) -> str:
    """Append /v1 to a provider base URL unless it already ends with it."""
    root = base_url.strip().rstrip("/")
    return root if root.endswith("/v1") else f"{root}/v1"


class OpenAICompatClient(ChatClient):
    """
    Chat-completions client built on the openai SDK.

    Works against any server exposing /v1/chat/completions. SDK retries are
    disabled: each complete() is exactly one HTTP request.
    """

    supports_tools = True

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
        self._client = AsyncOpenAI(
            base_url=api_root(self.base_url),
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=transport) if transport else None,
        )

    async def complete(
        self, request: ChatRequest, tools: list[ToolDescriptor] | None = None
    ) -> ChatReply:
        """Single non-streaming chat call; tools are attached only when present."""
        kwargs: dict = {
            "model": request.model,
            "temperature": request.temperature,
            "messages": [m.to_openai() for m in request.messages],
        }
        if tools:
            kwargs["tools"] = to_openai_tools(tools)
            kwargs["tool_choice"] = "auto"

        logger.info(
            f"{self.provider}.complete: model={request.model}, "
            f"messages={len(request.messages)}, tools={len(tools or [])}"
        )
        url = f"{api_root(self.base_url)}/chat/completions"
        self._record(TraceKind.TX_PROVIDER, kwargs, url=url)

        # Raw response: the body is decoded here so a malformed reply is a provider error
        try:
            raw = await self._client.chat.completions.with_raw_response.create(**kwargs)
        except openai.APIStatusError as e:
            raise self._rejected(e.response, url) from e
        except openai.APIError as e:
            self._record(TraceKind.RX_PROVIDER, str(e), url=url, status=0)
            raise ProviderCallError(self.provider, f"{type(e).__name__}: {e}") from e

        data = self._read_reply(raw.http_response, url)
        reply = parse_reply(self.provider, data)
        logger.info(
            f"{self.provider}.complete: text={len(reply.text)} chars, "
            f"tool_calls={len(reply.tool_calls)}"
        )
        return reply
