import hashlib
import hmac

import structlog
from fastapi import Depends, Request

from src.core.config import Config
from src.core.errors import InvalidSignatureError, PayloadTooLargeError
from src.webhooks.dependencies import get_config

logger = structlog.get_logger()


def verify_webhook_signature(raw_body: bytes | str, signature: str | None, secret: str) -> bool:
    """
    Check a Nylas webhook signature.

    The signature is the hex HMAC-SHA256 of the raw request body keyed by the
    webhook secret. The body must be the exact bytes received; re-serialized
    JSON may differ byte-for-byte and will not verify.

    An absent signature or an unset secret is treated as invalid.
    """
    if not signature:
        logger.warning("webhook_signature_missing")
        return False

    if not secret:
        logger.warning("webhook_secret_not_configured")
        return False

    body = raw_body.encode("utf-8") if isinstance(raw_body, str) else raw_body
    expected_signature = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()

    try:
        return hmac.compare_digest(signature, expected_signature)
    except TypeError:
        # compare_digest rejects non-ASCII str input
        return False


async def read_limited_body(request: Request, max_body_bytes: int) -> bytes:
    """Read the request body, failing as soon as it grows past `max_body_bytes`."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_body_bytes:
            logger.warning("webhook_body_too_large", max_body_bytes=max_body_bytes)
            raise PayloadTooLargeError()
        chunks.append(chunk)
    return b"".join(chunks)


async def verify_nylas_signature(request: Request, settings: Config = Depends(get_config)) -> bytes:
    """
    FastAPI dependency that verifies the Nylas webhook signature.

    Reads the configured signature header and compares it with an HMAC of the
    raw request body, before the body is parsed. Bodies sent without a
    Content-Length are size-checked here while they stream in.

    Raises:
        PayloadTooLargeError: If the body exceeds the configured limit.
        InvalidSignatureError: If the signature is missing or invalid.

    Returns:
        The raw request body.
    """
    signature = request.headers.get(settings.webhook.signature_header)
    raw_body = await read_limited_body(request, settings.webhook.max_body_bytes)

    if not verify_webhook_signature(raw_body, signature, settings.webhook.secret):
        logger.warning("webhook_signature_rejected", has_signature=signature is not None)
        raise InvalidSignatureError()

    logger.debug("webhook_signature_verified")
    return raw_body
