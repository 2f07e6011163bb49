"""JSON envelope shared by every endpoint: ``{"data": ..., "error": ...}``.

Exactly one of the two keys is non-null.
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Machine-readable code plus a message for the user."""

    code: str
    message: str


class ApiResponse(BaseModel):
    """Envelope schema, as documented in OpenAPI."""

    data: Any | None = None
    error: ErrorDetail | None = None


def success_response(data: Any) -> dict[str, Any]:
    """Wrap a JSON-able payload."""
    return ApiResponse(data=data).model_dump()


def error_response(code: str, message: str) -> dict[str, Any]:
    """Build the envelope for a failure."""
    return ApiResponse(error=ErrorDetail(code=code, message=message)).model_dump()


def error_json(status_code: int, code: str, message: str) -> JSONResponse:
    """Failure envelope as a response, for exception handlers."""
    return JSONResponse(status_code=status_code, content=error_response(code, message))
