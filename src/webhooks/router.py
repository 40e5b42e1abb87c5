import time
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, ValidationError

from src.api.errors import create_error_response, utc_timestamp
from src.core.config import Config
from src.core.errors import MalformedPayloadError
from src.webhooks.auth import verify_nylas_signature
from src.webhooks.dependencies import get_config, get_processor
from src.webhooks.models import WebhookDelta, WebhookPayload, WebhookResponse
from src.webhooks.processor import BatchEventProcessor

logger = structlog.get_logger()
router = APIRouter()


class SimulatedWebhookRequest(BaseModel):
    """Body of the development-only test endpoint."""

    type: str = "message.created"
    data: dict[str, Any] = Field(default_factory=lambda: {"object": {"id": "test-123"}})


def parse_webhook_payload(raw_body: bytes) -> WebhookPayload:
    """Parse the verified raw body into a WebhookPayload."""
    try:
        return WebhookPayload.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning("webhook_payload_invalid", errors=e.error_count())
        raise MalformedPayloadError() from e


@router.get("/verify", summary="Nylas webhook verification")
async def verify_webhook_endpoint(challenge: str | None = None):
    """Echo the challenge Nylas sends while a webhook subscription is set up."""
    if not challenge:
        return create_error_response(400, "Missing challenge parameter")

    logger.info("webhook_verification_requested")
    return {"challenge": challenge}


@router.post("", summary="Endpoint for all Nylas webhooks", response_model=WebhookResponse)
async def nylas_webhook_endpoint(
    raw_body: bytes = Depends(verify_nylas_signature),
    batch_processor: BatchEventProcessor = Depends(get_processor),
):
    """
    Receives Nylas webhook notifications.

    - The signature dependency rejects the request before the body is parsed.
    - The payload's deltas are processed with per-delta isolation.
    - The response is 200 even when some deltas fail; the body reports which.
      Only a failure outside the per-delta boundary returns 500, which makes
      Nylas redeliver the whole batch.
    """
    start_time = time.perf_counter()
    payload = parse_webhook_payload(raw_body)

    logger.info(
        "webhook_received",
        event_count=len(payload.deltas),
        types=[delta.type for delta in payload.deltas],
    )

    try:
        result = await batch_processor.process(payload)
    except MalformedPayloadError:
        raise
    except Exception as e:
        duration = int((time.perf_counter() - start_time) * 1000)
        logger.error("webhook_processing_error", error=str(e), duration_ms=duration, exc_info=True)
        return create_error_response(
            500,
            str(e) or "Failed to process webhook",
            duration=duration,
            timestamp=utc_timestamp(),
        )

    logger.info(
        "webhook_processing_complete",
        processed=result.processed,
        failed=result.failed,
        duration_ms=result.duration,
    )

    return WebhookResponse(
        processed=result.processed,
        failed=result.failed,
        errors=result.errors,
        duration=result.duration,
        timestamp=utc_timestamp(),
    )


@router.post("/test", summary="Simulate a webhook (non-production only)")
async def simulate_webhook_endpoint(
    body: SimulatedWebhookRequest | None = None,
    settings: Config = Depends(get_config),
    batch_processor: BatchEventProcessor = Depends(get_processor),
):
    """Inject a synthetic single-delta webhook, bypassing signature verification."""
    if settings.is_production:
        return create_error_response(404, "Route not found")

    body = body or SimulatedWebhookRequest()
    now_ms = int(time.time() * 1000)

    try:
        delta = WebhookDelta.model_validate(
            {
                "id": f"test-{now_ms}",
                "type": body.type,
                "specversion": "1.0",
                "source": "test",
                "time": utc_timestamp(),
                "data": body.data,
            }
        )
    except ValidationError as e:
        raise MalformedPayloadError() from e

    logger.info("simulated_webhook_received", event_id=delta.id, event_type=delta.type)
    result = await batch_processor.process_delta(delta)

    if result.errors:
        return create_error_response(500, result.errors[0].message)

    return {
        "success": True,
        "message": "Test webhook processed",
        "event": delta.to_wire(),
        "processed": result.processed,
        "failed": result.failed,
        "errors": [],
    }
