"""Canonical tool descriptor and tool result types."""

import json
from dataclasses import dataclass, field
from typing import Any


def default_parameters_schema() -> dict:
    """Schema used when a tool supplies none: any object is accepted."""
    return {"type": "object", "properties": {}, "additionalProperties": True}


@dataclass(frozen=True)
class ToolDescriptor:
    """A callable function as presented to an OpenAI-compatible model."""

    name: str
    description: str = ""
    parameters_schema: dict = field(default_factory=default_parameters_schema)

    def to_openai_tool(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema,
            },
        }


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool invocation. Failures are data, never exceptions."""

    ok: bool
    status: int  # HTTP status, 0 when no request was sent
    body: Any = None

    @classmethod
    def failure(cls, error: str, detail: str, status: int = 502) -> "ToolResult":
        return cls(ok=False, status=status, body={"error": error, "detail": detail})

    def to_payload(self) -> dict:
        return {"ok": self.ok, "status": self.status, "body": self.body}

    def to_message_content(self) -> str:
        """JSON text placed in the tool message sent back to the model."""
        return json.dumps(self.to_payload(), ensure_ascii=False, default=str)
