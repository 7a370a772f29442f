"""Pydantic response models for OpenAPI documentation."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Structured error returned by all non-2xx responses."""

    error: bool = Field(True, description="Always true for error responses")
    status_code: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable error message")
    request_id: str | None = Field(
        None, description="ID of the failed request, when one was bound"
    )


class RequestIdResponse(BaseModel):
    """The ID bound to the current request."""

    request_id: str = Field(..., description="Textual form of the request ID")
    message: str = Field(..., description="Greeting that embeds the request ID")


class HealthResponse(BaseModel):
    """Service status and active request ID configuration."""

    status: str = Field(..., description="Always 'ok' when the service is up")
    id_strategy: str = Field(..., description="Generation strategy: 'counter' or 'random'")
    response_header: str | None = Field(
        None, description="Header carrying the request ID, null when disabled"
    )
