"""
TraceSink - bounded, time-ordered log of every request/response crossing the gateway.

Writers from concurrent orchestration runs (and worker threads) append through a
single lock; readers get a copied snapshot. Oldest events are evicted first.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TraceKind(str, Enum):
    """Direction tag for a trace event."""

    RX_AGENT = "rx_agent"
    TX_AGENT = "tx_agent"
    TX_PROVIDER = "tx_provider"
    RX_PROVIDER = "rx_provider"
    TX_REGISTRY = "tx_registry"
    RX_REGISTRY = "rx_registry"
    TOOL_ARGS = "tool_args"
    TX_MAXIMO = "tx_maximo"
    RX_MAXIMO = "rx_maximo"


Scalar = str | int | float | bool | None


class TraceEvent(BaseModel):
    """Immutable trace record."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    kind: TraceKind
    tenant: str = ""
    meta: dict[str, Scalar] = Field(default_factory=dict)
    payload: Any = None


def _clip(value: Any, limit: int) -> Any:
    """Truncate every string inside a JSON-like value to limit characters."""
    if isinstance(value, str):
        return value if len(value) <= limit else value[:limit] + "…"
    if isinstance(value, dict):
        return {k: _clip(v, limit) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_clip(v, limit) for v in value]
    return value


class TraceSink:
    """Append-only ring buffer of TraceEvents."""

    def __init__(self, capacity: int = 500, max_payload_chars: int = 2000) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._max_payload_chars = max_payload_chars
        self._events: deque[TraceEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def append(
        self,
        kind: TraceKind | str,
        payload: Any = None,
        meta: dict[str, Scalar] | None = None,
        tenant: str = "",
    ) -> TraceEvent:
        """Record one event and return it."""
        event = TraceEvent(
            kind=TraceKind(kind),
            tenant=tenant,
            meta=dict(meta or {}),
            payload=_clip(payload, self._max_payload_chars),
        )
        with self._lock:
            self._events.append(event)
        return event

    def read_recent(
        self,
        limit: int | None = None,
        kind: TraceKind | str | None = None,
        newest_first: bool = False,
    ) -> list[TraceEvent]:
        """
        Return the most recent events.

        Args:
            limit:        Maximum events to return (capped at capacity, None = capacity)
            kind:         Only return events of this kind
            newest_first: Reverse the default oldest-to-newest order

        Returns:
            Snapshot list; later appends do not affect it.
        """
        with self._lock:
            events = list(self._events)

        if kind is not None:
            wanted = TraceKind(kind)
            events = [e for e in events if e.kind == wanted]

        bound = self._capacity if limit is None else max(0, min(limit, self._capacity))
        recent = events[-bound:] if bound else []
        if newest_first:
            recent.reverse()
        return recent

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
        logger.info("Trace buffer cleared")
