from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.api.errors import create_error_response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject request bodies whose declared size exceeds `max_body_bytes`.

    Bodies without a Content-Length are counted as they are read by
    `src.webhooks.auth.read_limited_body`.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int = 1_048_576):
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method in ("POST", "PUT", "PATCH"):
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
                return create_error_response(413, "Payload too large")
        return await call_next(request)
