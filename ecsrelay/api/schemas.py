"""Response schemas for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    channels: list[str] = Field(default_factory=list)


class RelayResponse(BaseModel):
    """Result of relaying one event."""

    outcome: str
    resource: str = ""
    deliveries: dict[str, str] = Field(default_factory=dict)
