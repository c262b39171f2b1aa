"""Bounded request/response trace buffer."""

from .sink import TraceEvent, TraceKind, TraceSink

__all__ = ["TraceEvent", "TraceKind", "TraceSink"]
