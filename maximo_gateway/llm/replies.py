"""
Reply adapters: provider JSON -> ChatReply.

One function per reply shape, selected by provider id through REPLY_PARSERS. Each
tolerates missing fields (an absent field means empty text / no tool calls).
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from .types import ChatReply, ToolCallRequest

logger = logging.getLogger(__name__)


def _first(items: Any) -> dict:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _join_text(parts: Any) -> str:
    """Join the non-empty "text" fields of a list of blocks with newlines."""
    if not isinstance(parts, list):
        return ""
    texts = [
        p["text"]
        for p in parts
        if isinstance(p, dict) and isinstance(p.get("text"), str) and p["text"]
    ]
    return "\n".join(texts)


def _raw_arguments(arguments: Any) -> str:
    if arguments is None:
        return ""
    if isinstance(arguments, str):
        return arguments
    # Some compatible servers send an already-decoded object
    return json.dumps(arguments)


def parse_openai_reply(data: dict) -> ChatReply:
    """Read choices[0].message.{content, tool_calls}."""
    message = _first(data.get("choices")).get("message") or {}

    content = message.get("content")
    text = _join_text(content) if isinstance(content, list) else (content or "")

    tool_calls = []
    for index, call in enumerate(message.get("tool_calls") or []):
        if not isinstance(call, dict):
            continue
        function = call.get("function") or {}
        tool_calls.append(
            ToolCallRequest(
                id=str(call.get("id") or f"call_{index}"),
                name=str(function.get("name") or ""),
                raw_arguments=_raw_arguments(function.get("arguments")),
            )
        )

    return ChatReply(text=text, tool_calls=tool_calls, raw=data)


def parse_anthropic_reply(data: dict) -> ChatReply:
    """Concatenate content[].text blocks."""
    return ChatReply(text=_join_text(data.get("content")), raw=data)


def parse_gemini_reply(data: dict) -> ChatReply:
    """Concatenate candidates[0].content.parts[].text."""
    content = _first(data.get("candidates")).get("content") or {}
    return ChatReply(text=_join_text(content.get("parts")), raw=data)


def parse_watsonx_reply(data: dict) -> ChatReply:
    """Read results[0].generated_text."""
    text = _first(data.get("results")).get("generated_text") or ""
    return ChatReply(text=str(text), raw=data)


REPLY_PARSERS: dict[str, Callable[[dict], ChatReply]] = {
    "openai": parse_openai_reply,
    "mistral": parse_openai_reply,
    "deepseek": parse_openai_reply,
    "anthropic": parse_anthropic_reply,
    "gemini": parse_gemini_reply,
    "watsonx": parse_watsonx_reply,
}


def parse_reply(provider: str, data: dict) -> ChatReply:
    """Dispatch to the adapter registered for provider."""
    try:
        parser = REPLY_PARSERS[provider]
    except KeyError:
        raise ValueError(f"No reply adapter for provider '{provider}'") from None
    return parser(data)
