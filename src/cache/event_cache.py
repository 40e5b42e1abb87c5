"""
Event cache store.

Webhook handlers keep a short-lived cache of calendar events, messages and
contacts up to date so downstream queries avoid a round-trip to Nylas.
`EventCacheStore` is the contract handlers depend on; `InMemoryEventCache`
implements it on a `cachetools.TLRUCache` with a per-entry expiry.
"""

import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Protocol

import structlog
from cachetools import TLRUCache

logger = structlog.get_logger()

CacheKey = tuple[str, str, str]

SECONDS_PER_HOUR = 3600


@dataclass
class CachedEvent:
    """A cached resource written from a webhook delta."""

    grant_id: str
    resource_type: str
    resource_id: str
    data: dict[str, Any]
    ttl_hours: float
    last_synced_at: datetime
    version: int
    source: str = "webhook"
    expires_at: datetime = field(init=False)

    def __post_init__(self) -> None:
        self.expires_at = self.last_synced_at + timedelta(hours=self.ttl_hours)


class EventCacheStore(Protocol):
    """Interface of the cache that webhook handlers write through."""

    async def upsert_event(
        self,
        grant_id: str,
        resource_type: str,
        resource_id: str,
        fields: dict[str, Any],
        ttl_hours: float = 24,
    ) -> CachedEvent: ...

    async def delete_event(self, grant_id: str, resource_type: str, resource_id: str) -> bool: ...

    async def clear_grant_cache(self, grant_id: str) -> int: ...

    async def get_cache_stats(self) -> dict[str, int]: ...


def _normalize(resource_type: str | Enum) -> str:
    return str(resource_type.value) if isinstance(resource_type, Enum) else str(resource_type)


class InMemoryEventCache:
    """
    Process-local event cache.

    Entries expire `ttl_hours` after their last upsert. When the cache is full
    the least recently used entry is evicted.

    Example:
        cache = InMemoryEventCache(max_entries=1000)
        await cache.upsert_event("grant-1", "calendar", "evt-1", {"title": "Standup"}, ttl_hours=24)
    """

    def __init__(self, max_entries: int = 10_000, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache = TLRUCache(maxsize=max_entries, ttu=self._time_to_use, timer=timer)

    @staticmethod
    def _time_to_use(_key: CacheKey, entry: CachedEvent, now: float) -> float:
        return now + entry.ttl_hours * SECONDS_PER_HOUR

    async def upsert_event(
        self,
        grant_id: str,
        resource_type: str,
        resource_id: str,
        fields: dict[str, Any],
        ttl_hours: float = 24,
    ) -> CachedEvent:
        """Insert or replace a cached entry and refresh its expiry."""
        now = datetime.now(UTC)
        entry = CachedEvent(
            grant_id=grant_id,
            resource_type=_normalize(resource_type),
            resource_id=resource_id,
            data=fields,
            ttl_hours=ttl_hours,
            last_synced_at=now,
            version=int(now.timestamp() * 1000),
        )
        self._entries[(grant_id, entry.resource_type, resource_id)] = entry
        logger.debug(
            "event_cache_upserted",
            grant_id=grant_id,
            resource_type=entry.resource_type,
            resource_id=resource_id,
            ttl_hours=ttl_hours,
        )
        return entry

    async def delete_event(self, grant_id: str, resource_type: str, resource_id: str) -> bool:
        """Remove a cached entry. Returns False if it was not cached."""
        removed = self._entries.pop((grant_id, _normalize(resource_type), resource_id), None)
        logger.debug(
            "event_cache_deleted",
            grant_id=grant_id,
            resource_type=_normalize(resource_type),
            resource_id=resource_id,
            found=removed is not None,
        )
        return removed is not None

    async def clear_grant_cache(self, grant_id: str) -> int:
        """Remove every entry belonging to a grant. Returns the number removed."""
        keys = [key for key in list(self._entries.keys()) if key[0] == grant_id]
        for key in keys:
            self._entries.pop(key, None)
        logger.info("event_cache_grant_cleared", grant_id=grant_id, removed=len(keys))
        return len(keys)

    async def get_event(self, grant_id: str, resource_type: str, resource_id: str) -> CachedEvent | None:
        return self._entries.get((grant_id, _normalize(resource_type), resource_id))

    async def get_events(self, grant_id: str, resource_type: str) -> list[CachedEvent]:
        """List live entries of one resource type for a grant."""
        resource_type = _normalize(resource_type)
        return [
            entry
            for entry in self._live_entries()
            if entry.grant_id == grant_id and entry.resource_type == resource_type
        ]

    async def get_cache_stats(self) -> dict[str, int]:
        counts = Counter(entry.resource_type for entry in self._live_entries())
        return {
            "total_events": sum(counts.values()),
            "calendar_events": counts.get("calendar", 0),
            "messages": counts.get("message", 0),
            "contacts": counts.get("contact", 0),
        }

    def _live_entries(self) -> list[CachedEvent]:
        self._entries.expire()
        entries = (self._entries.get(key) for key in list(self._entries.keys()))
        return [entry for entry in entries if entry is not None]

    def __len__(self) -> int:
        return len(self._live_entries())
