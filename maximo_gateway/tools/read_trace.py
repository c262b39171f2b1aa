"""
read_trace tool implementation.

Returns recent trace events for the UI's log panel.
"""

import logging

from maximo_gateway.config.schema import TraceConfig
from maximo_gateway.errors import ConfigurationError
from maximo_gateway.models.requests import TraceQuery
from maximo_gateway.models.responses import TraceResponse
from maximo_gateway.trace import TraceKind, TraceSink

logger = logging.getLogger(__name__)


async def read_trace(query: TraceQuery, sink: TraceSink, config: TraceConfig) -> dict:
    """
    Read the most recent trace events.

    Args:
        query:  limit (default config.default_limit, capped at capacity), kind, order
        sink:   Process trace sink
        config: Trace configuration

    Returns:
        TraceResponse as dict

    Raises:
        ConfigurationError: Unknown event kind
    """
    limit = config.default_limit if query.limit is None else query.limit
    limit = min(limit, sink.capacity)

    kind = None
    if query.kind:
        try:
            kind = TraceKind(query.kind)
        except ValueError:
            raise ConfigurationError(f"Unknown trace kind: {query.kind}") from None

    events = sink.read_recent(limit=limit, kind=kind, newest_first=query.order == "desc")
    return TraceResponse(events=[e.model_dump(mode="json") for e in events]).model_dump()
