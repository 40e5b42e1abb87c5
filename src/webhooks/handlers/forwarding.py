import structlog

from src.integrations.main_app import MainAppClient
from src.webhooks.handlers.base import DeltaHandler
from src.webhooks.models import WebhookDelta

logger = structlog.get_logger()


class ForwardingDeltaHandler(DeltaHandler):
    """Passes a delta to the main app without touching the cache."""

    def __init__(self, forwarder: MainAppClient):
        self.forwarder = forwarder

    async def handle(self, delta: WebhookDelta) -> None:
        logger.info("delta_forwarding", event_id=delta.id, event_type=delta.type)
        await self.forwarder.forward(delta)
