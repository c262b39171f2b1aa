"""LLM provider integration: canonical types, reply adapters, chat clients."""

from .base import ChatClient
from .catalog import CURATED_MODELS, list_models
from .factory import create_chat_client, is_openai_compatible
from .replies import REPLY_PARSERS, parse_reply
from .types import ChatReply, ChatRequest, Message, ToolCallRequest

__all__ = [
    "ChatClient",
    "ChatReply",
    "ChatRequest",
    "Message",
    "ToolCallRequest",
    "REPLY_PARSERS",
    "parse_reply",
    "create_chat_client",
    "is_openai_compatible",
    "list_models",
    "CURATED_MODELS",
]
