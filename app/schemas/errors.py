"""Uniform error envelope returned for every failed request."""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body: timestamp, status code, reason phrase, message and optional details."""

    timestamp: datetime
    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="Short reason phrase (e.g. Not Found)")
    message: str
    path: str
    details: list[str] | None = Field(
        default=None,
        description="Per-field messages for validation failures",
    )
