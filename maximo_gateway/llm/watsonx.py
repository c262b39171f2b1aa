"""Chat client for watsonx.ai text generation (single generated_text, no tools)."""

import logging

from maximo_gateway.registry.types import ToolDescriptor

from .base import ChatClient
from .replies import parse_reply
from .types import ChatReply, ChatRequest

logger = logging.getLogger(__name__)

API_VERSION = "2024-05-01"
MAX_NEW_TOKENS = 1024


def build_prompt(request: ChatRequest) -> str:
    """
    Flatten the conversation into a single prompt string.

    A lone user message without a system prompt is sent as-is.
    """
    turns = [m for m in request.messages if m.role in ("user", "assistant")]
    system = request.system_prompt
    if not system and len(turns) == 1 and turns[0].role == "user":
        return turns[0].content

    lines = [f"{'User' if m.role == 'user' else 'Assistant'}: {m.content}" for m in turns]
    prompt = "\n".join(lines) + "\nAssistant:"
    return f"{system}\n\n{prompt}" if system else prompt


class WatsonxChatClient(ChatClient):
    supports_tools = False

    def __init__(self, provider: str, api_key: str, base_url: str, project_id: str, **kwargs):
        super().__init__(provider, api_key, base_url, **kwargs)
        self.project_id = project_id

    async def complete(
        self, request: ChatRequest, tools: list[ToolDescriptor] | None = None
    ) -> ChatReply:
        body = {
            "model_id": request.model,
            "input": build_prompt(request),
            "parameters": {"temperature": request.temperature, "max_new_tokens": MAX_NEW_TOKENS},
            "project_id": self.project_id,
        }
        data = await self._post_json(
            f"{self.base_url}/ml/v1/text/generation",
            body,
            headers={"authorization": f"Bearer {self._api_key}"},
            params={"version": API_VERSION},
        )
        return parse_reply(self.provider, data)
