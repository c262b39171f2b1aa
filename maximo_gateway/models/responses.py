"""
Pydantic response models for the exposed operations.

All operations return structured responses using these models for consistency.
"""

from pydantic import BaseModel, Field


class AgentChatResponse(BaseModel):
    """Successful orchestration result."""

    reply: str = Field(description="Final answer text")


class ErrorResponse(BaseModel):
    """Failure payload for every error path."""

    error: str = Field(description="Error kind tag")
    detail: str = Field(default="", description="Short diagnostic")


class TraceResponse(BaseModel):
    """Trace read result."""

    events: list[dict] = Field(default_factory=list)


class ModelsResponse(BaseModel):
    """Model listing result."""

    models: list[str] = Field(default_factory=list)
    warning: str | None = None
    detail: str | None = None


class TableResult(BaseModel):
    title: str
    columns: list[str] = Field(default_factory=list)
    rows: list[dict] = Field(default_factory=list)


class MaximoQueryResponse(BaseModel):
    """Quick query result rendered as a table."""

    summary: str
    table: TableResult
    trace: dict


class MaximoRawResponse(BaseModel):
    """Raw OSLC call result (status mirrors Maximo's)."""

    status: int
    trace: dict
