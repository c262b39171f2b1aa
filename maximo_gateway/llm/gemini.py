"""Chat client for Gemini generateContent (candidate-part replies, no tools)."""

import logging
from urllib.parse import quote

from maximo_gateway.registry.types import ToolDescriptor

from .base import ChatClient
from .replies import parse_reply
from .types import ChatReply, ChatRequest

logger = logging.getLogger(__name__)

_ROLES = {"user": "user", "assistant": "model"}


class GeminiChatClient(ChatClient):
    supports_tools = False

    async def complete(
        self, request: ChatRequest, tools: list[ToolDescriptor] | None = None
    ) -> ChatReply:
        body: dict = {
            "contents": [
                {"role": _ROLES[m.role], "parts": [{"text": m.content}]}
                for m in request.messages
                if m.role in _ROLES and m.content
            ],
            "generationConfig": {"temperature": request.temperature},
        }
        if request.system_prompt:
            body["systemInstruction"] = {"parts": [{"text": request.system_prompt}]}

        url = f"{self.base_url}/v1beta/models/{quote(request.model, safe='')}:generateContent"
        data = await self._post_json(url, body, params={"key": self._api_key})
        return parse_reply(self.provider, data)
