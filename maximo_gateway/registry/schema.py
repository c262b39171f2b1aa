"""
Tool schema adapter.

Turns tool descriptors of unknown shape into canonical ToolDescriptors. Accepted
inputs, in any mix:

- already-normalized entries: {"type": "function", "function": {name, description, parameters}}
- registry-native entries:    {name, description, inputSchema}
- ToolDescriptor instances

Entries without a usable name are dropped; later duplicates of a name are dropped.
Running the adapter on its own output returns the same list.
"""

import copy
import logging
from collections.abc import Iterable
from typing import Any

from .types import ToolDescriptor, default_parameters_schema

logger = logging.getLogger(__name__)


def _coerce_schema(schema: Any) -> dict:
    if isinstance(schema, dict):
        return copy.deepcopy(schema)
    return default_parameters_schema()


def normalize_tool(raw: Any) -> ToolDescriptor | None:
    """Normalize one descriptor, None if it has no usable name."""
    if isinstance(raw, ToolDescriptor):
        return raw if raw.name.strip() else None
    if not isinstance(raw, dict):
        return None

    if raw.get("type") == "function" and isinstance(raw.get("function"), dict):
        fn = raw["function"]
        name, description, schema = fn.get("name"), fn.get("description"), fn.get("parameters")
    else:
        name = raw.get("name")
        description = raw.get("description")
        schema = raw.get("inputSchema", raw.get("parameters"))

    name = str(name or "").strip()
    if not name:
        return None

    return ToolDescriptor(
        name=name,
        description=str(description or ""),
        parameters_schema=_coerce_schema(schema),
    )


def normalize_tools(raw_tools: Iterable[Any] | None) -> list[ToolDescriptor]:
    """
    Normalize a list of raw tool descriptors, preserving relative order.

    Args:
        raw_tools: Descriptors as returned by the registry (non-lists yield [])

    Returns:
        Canonical descriptors with unique, non-empty names
    """
    if not isinstance(raw_tools, (list, tuple)):
        return []

    tools: list[ToolDescriptor] = []
    seen: set[str] = set()
    dropped = 0
    for raw in raw_tools:
        tool = normalize_tool(raw)
        if tool is None:
            dropped += 1
            continue
        if tool.name in seen:
            logger.warning(f"Duplicate tool name '{tool.name}' ignored")
            continue
        seen.add(tool.name)
        tools.append(tool)

    if dropped:
        logger.debug(f"Dropped {dropped} tool descriptor(s) without a name")
    return tools


def to_openai_tools(tools: Iterable[ToolDescriptor]) -> list[dict]:
    """Render descriptors in the chat-completions `tools` format."""
    return [tool.to_openai_tool() for tool in tools]
