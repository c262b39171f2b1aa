"""
Data models for maximo-gateway.

Provides Pydantic request and response models for the exposed operations.
"""

from maximo_gateway.models.requests import (
    AgentChatRequest,
    MaximoQueryRequest,
    MaximoRawRequest,
    TraceQuery,
)
from maximo_gateway.models.responses import (
    AgentChatResponse,
    ErrorResponse,
    MaximoQueryResponse,
    MaximoRawResponse,
    ModelsResponse,
    TableResult,
    TraceResponse,
)

__all__ = [
    # Requests
    "AgentChatRequest",
    "TraceQuery",
    "MaximoQueryRequest",
    "MaximoRawRequest",
    # Responses
    "AgentChatResponse",
    "ErrorResponse",
    "TraceResponse",
    "ModelsResponse",
    "TableResult",
    "MaximoQueryResponse",
    "MaximoRawResponse",
]
