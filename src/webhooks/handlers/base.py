from abc import ABC, abstractmethod
from typing import Any, ClassVar

import structlog

from src.cache.event_cache import EventCacheStore
from src.core.errors import DeltaHandlerError
from src.core.models import ResourceType
from src.integrations.main_app import MainAppClient
from src.webhooks.models import WebhookDelta

logger = structlog.get_logger()


class DeltaHandler(ABC):
    """
    Abstract base class for all webhook delta handlers.

    A handler applies one delta and returns normally, or raises to mark the
    delta as failed. The batch processor isolates each call, so handlers do
    not need to protect the rest of the batch.
    """

    @abstractmethod
    async def handle(self, delta: WebhookDelta) -> None:
        """
        Apply a single webhook delta.

        Args:
            delta: The validated delta, with its `data.object` and grant ID.
        """
        pass


class CachedResourceHandler(DeltaHandler):
    """
    Writes a resource delta through to the event cache, then forwards it.

    Deletions remove the cache entry; every other event upserts the fields
    returned by `extract_fields` with the configured TTL.
    """

    resource_type: ClassVar[ResourceType]

    def __init__(self, cache: EventCacheStore, forwarder: MainAppClient | None = None, ttl_hours: float = 24):
        self.cache = cache
        self.forwarder = forwarder
        self.ttl_hours = ttl_hours

    @abstractmethod
    def extract_fields(self, resource: dict[str, Any]) -> dict[str, Any]:
        """Select the cached fields from the provider's resource representation."""

    async def handle(self, delta: WebhookDelta) -> None:
        grant_id = delta.grant_id
        resource_id = delta.resource_id
        if not grant_id:
            raise DeltaHandlerError(f"Delta {delta.id} has no grant_id")
        if not resource_id:
            raise DeltaHandlerError(f"Delta {delta.id} has no object id")

        log = logger.bind(
            event_id=delta.id,
            event_type=delta.type,
            grant_id=grant_id,
            resource_type=self.resource_type.value,
            resource_id=resource_id,
        )

        event_type = delta.event_type
        if event_type is not None and event_type.is_deletion:
            await self.cache.delete_event(grant_id, self.resource_type.value, resource_id)
            log.info("cache_entry_deleted")
        else:
            await self.cache.upsert_event(
                grant_id,
                self.resource_type.value,
                resource_id,
                self.extract_fields(delta.data.resource),
                self.ttl_hours,
            )
            log.info("cache_entry_upserted")

        if self.forwarder is not None:
            await self.forwarder.forward(delta)
