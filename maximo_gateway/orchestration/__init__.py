"""Tool orchestration loop."""

from .loop import (
    DEFAULT_MAX_ITERATIONS,
    MAX_ITERATIONS_REPLY,
    RunResult,
    RunState,
    ToolOrchestrator,
)

__all__ = [
    "ToolOrchestrator",
    "RunResult",
    "RunState",
    "DEFAULT_MAX_ITERATIONS",
    "MAX_ITERATIONS_REPLY",
]
