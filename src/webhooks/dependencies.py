"""
Shared service instances and the FastAPI dependencies that provide them.

Components receive their config through constructors; only this module reads
the global config. Override these dependencies to swap in test doubles.
"""

from src.cache.event_cache import EventCacheStore, InMemoryEventCache
from src.core.config import Config, config
from src.integrations.main_app import MainAppClient
from src.webhooks.dispatcher import build_dispatcher
from src.webhooks.processor import BatchEventProcessor

event_cache = InMemoryEventCache(max_entries=config.cache.max_entries)
main_app_client = MainAppClient(config.main_app)
dispatcher = build_dispatcher(event_cache, main_app_client, cache_ttl_hours=config.cache.ttl_hours)
processor = BatchEventProcessor(dispatcher, handler_timeout=config.webhook.handler_timeout)


def get_config() -> Config:
    """Returns the shared configuration instance."""
    return config


def get_event_cache() -> EventCacheStore:
    """Returns the shared event cache."""
    return event_cache


def get_processor() -> BatchEventProcessor:
    """Returns the shared BatchEventProcessor instance."""
    return processor
