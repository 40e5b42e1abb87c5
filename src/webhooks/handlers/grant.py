import structlog

from src.cache.event_cache import EventCacheStore
from src.core.errors import DeltaHandlerError
from src.integrations.main_app import MainAppClient
from src.webhooks.handlers.base import DeltaHandler
from src.webhooks.models import WebhookDelta

logger = structlog.get_logger()


class GrantDeltaHandler(DeltaHandler):
    """Handler for grant lifecycle deltas (`grant.*`)."""

    def __init__(self, cache: EventCacheStore, forwarder: MainAppClient | None = None):
        self.cache = cache
        self.forwarder = forwarder

    async def handle(self, delta: WebhookDelta) -> None:
        # For grant events the object is the grant itself
        grant_id = delta.grant_id or delta.resource_id
        if not grant_id:
            raise DeltaHandlerError(f"Delta {delta.id} has no grant_id")

        log = logger.bind(event_id=delta.id, event_type=delta.type, grant_id=grant_id)

        if delta.event_type is not None and delta.event_type.revokes_grant:
            removed = await self.cache.clear_grant_cache(grant_id)
            log.info("grant_revoked", cache_entries_removed=removed)
        else:
            log.info("grant_changed")

        if self.forwarder is not None:
            await self.forwarder.forward(delta)
