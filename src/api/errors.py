"""Structured error responses for consistent API error handling."""

from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import WebhookError

logger = structlog.get_logger()


class ErrorResponse(BaseModel):
    """Standardized error response schema."""

    success: bool = False
    error: str
    status_code: int | None = None
    path: str | None = None
    duration: int | None = None
    timestamp: str | None = None


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def create_error_response(http_status: int, error: str, **fields: Any) -> JSONResponse:
    """Create a JSON error response in the service's `{success: false, error}` shape."""
    body = ErrorResponse(error=error, **fields)
    return JSONResponse(status_code=http_status, content=body.model_dump(exclude_none=True))


async def webhook_error_handler(request: Request, exc: WebhookError) -> JSONResponse:
    """Render WebhookError subclasses with their mapped HTTP status."""
    logger.warning("webhook_request_rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return create_error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (404, 405, ...) in the same shape."""
    error = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return create_error_response(exc.status_code, error, status_code=exc.status_code, path=request.url.path)
