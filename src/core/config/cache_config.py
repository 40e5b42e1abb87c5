"""
Event cache configuration.

Defines size and expiry settings for the webhook event cache.
"""

from dataclasses import dataclass


@dataclass
class CacheConfig:
    """Event cache configuration."""

    max_entries: int = 10_000
    ttl_hours: int = 24  # Entries written by webhooks expire after a day
