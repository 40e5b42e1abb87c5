"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from src.core.config.cache_config import CacheConfig
from src.core.config.cors_config import CORSConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.main_app_config import MainAppConfig
from src.core.config.settings import Config, config
from src.core.config.webhook_config import WebhookConfig

__all__ = [
    "CORSConfig",
    "CacheConfig",
    "Config",
    "LoggingConfig",
    "MainAppConfig",
    "WebhookConfig",
    "config",
]
