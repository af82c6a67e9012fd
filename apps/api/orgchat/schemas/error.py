"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class NoLeakNotFoundError(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str


class UpstreamErrorDetails(BaseModel):
    status: int | None = None
    body: str


class UpstreamFailureError(BaseModel):
    code: Literal["UPSTREAM_ERROR", "INVALID_UPSTREAM_RESPONSE"]
    message: str
    details: UpstreamErrorDetails | None = None
