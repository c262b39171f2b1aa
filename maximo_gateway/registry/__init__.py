"""Tool-registry integration: schema adapter and invocation client."""

from .client import RegistryClient
from .schema import normalize_tool, normalize_tools, to_openai_tools
from .types import ToolDescriptor, ToolResult, default_parameters_schema

__all__ = [
    "RegistryClient",
    "ToolDescriptor",
    "ToolResult",
    "default_parameters_schema",
    "normalize_tool",
    "normalize_tools",
    "to_openai_tools",
]
