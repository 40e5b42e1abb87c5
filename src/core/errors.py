"""
Core error classes for the webhooks service.

Each error carries the HTTP status it maps to when it escapes to the
request layer. Per-delta failures are reported in-band and never reach it.
"""


class WebhookError(Exception):
    """Base class for errors surfaced to the webhook sender."""

    status_code: int = 500
    default_message: str = "Failed to process webhook"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidSignatureError(WebhookError):
    """Raised when the webhook signature is missing or does not match."""

    status_code = 401
    default_message = "Invalid webhook signature"


class MalformedPayloadError(WebhookError):
    """Raised when the payload has no usable `deltas` list."""

    status_code = 400
    default_message = "Invalid webhook payload"


class DeltaHandlerError(WebhookError):
    """Raised by a handler that cannot process a single delta."""

    status_code = 500
    default_message = "Failed to process delta"


class PipelineError(WebhookError):
    """Raised when a failure escapes the per-delta isolation boundary."""

    status_code = 500


class PayloadTooLargeError(WebhookError):
    """Raised when the request body exceeds the configured size limit."""

    status_code = 413
    default_message = "Payload too large"
