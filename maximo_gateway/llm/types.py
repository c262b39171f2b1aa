"""Canonical conversation and reply types shared by all provider clients."""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["system", "user", "assistant", "tool"]


@dataclass(frozen=True)
class ToolCallRequest:
    """A model-issued request to invoke a named tool."""

    id: str  # provider-assigned, correlates the tool message
    name: str
    raw_arguments: str  # JSON text exactly as the provider sent it

    def parse_arguments(self) -> dict[str, Any]:
        """
        Parse raw_arguments into an argument object.

        Empty text means no arguments. Text that is not a JSON object is passed
        through as {"raw": raw_arguments} so the tool can reject it itself.
        """
        if not self.raw_arguments.strip():
            return {}
        try:
            parsed = json.loads(self.raw_arguments)
        except json.JSONDecodeError:
            return {"raw": self.raw_arguments}
        if not isinstance(parsed, dict):
            return {"raw": self.raw_arguments}
        return parsed

    def to_openai(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.raw_arguments},
        }


@dataclass(frozen=True)
class Message:
    """One conversation entry."""

    role: Role
    content: str = ""
    tool_calls: tuple[ToolCallRequest, ...] = ()
    tool_call_id: str | None = None

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls, content: str = "", tool_calls: list[ToolCallRequest] | None = None
    ) -> "Message":
        return cls(role="assistant", content=content, tool_calls=tuple(tool_calls or ()))

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_openai(self) -> dict:
        """Render in the chat-completions message format."""
        if self.role == "tool":
            return {"role": "tool", "tool_call_id": self.tool_call_id, "content": self.content}
        message: dict = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [tc.to_openai() for tc in self.tool_calls]
        return message


@dataclass
class ChatReply:
    """Normalized reply from any provider."""

    text: str
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    raw: dict = field(default_factory=dict)  # provider JSON, kept for tracing

    @property
    def is_terminal(self) -> bool:
        return not self.tool_calls


@dataclass
class ChatRequest:
    """Everything a provider client needs for one completion."""

    messages: list[Message]
    model: str
    temperature: float = 0.7

    @property
    def system_prompt(self) -> str:
        return "\n\n".join(m.content for m in self.messages if m.role == "system")
