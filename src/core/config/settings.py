"""
Main configuration class that composes all configs.
"""

import json
import logging
import os

from dotenv import load_dotenv

from src.core.config.cache_config import CacheConfig
from src.core.config.cors_config import CORSConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.main_app_config import MainAppConfig
from src.core.config.webhook_config import WebhookConfig

# Load environment variables from a .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _optional_timeout(raw: str) -> float | None:
    value = float(raw)
    return value if value > 0 else None


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.webhook = WebhookConfig(
            secret=os.getenv("NYLAS_WEBHOOK_SECRET", ""),
            signature_header=os.getenv("NYLAS_SIGNATURE_HEADER", "X-Nylas-Signature"),
            handler_timeout=_optional_timeout(os.getenv("WEBHOOK_HANDLER_TIMEOUT", "30")),
            max_body_bytes=int(os.getenv("WEBHOOK_MAX_BODY_BYTES", "1048576")),
        )

        self.main_app = MainAppConfig(
            url=os.getenv("MAIN_APP_URL", ""),
            process_path=os.getenv("MAIN_APP_PROCESS_PATH", "/api/webhooks/nylas/process"),
            timeout=float(os.getenv("MAIN_APP_TIMEOUT", "5")),
        )

        self.cache = CacheConfig(
            max_entries=int(os.getenv("EVENT_CACHE_MAX_ENTRIES", "10000")),
            ttl_hours=int(os.getenv("EVENT_CACHE_TTL_HOURS", "24")),
        )

        # CORS configuration
        cors_headers = os.getenv("CORS_HEADERS", '["*"]')
        cors_origins = os.getenv("CORS_ORIGINS", '["*"]')

        try:
            self.cors = CORSConfig(
                headers=json.loads(cors_headers),
                origins=json.loads(cors_origins),
            )
        except json.JSONDecodeError:
            # Nylas calls in from its own infrastructure, so fall back to allowing any origin
            self.cors = CORSConfig()

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        )

        # Server settings
        self.host = os.getenv("HOST", "127.0.0.1")  # Internal only by default
        self.port = int(os.getenv("PORT", "3002"))

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.webhook.secret:
            # Not fatal: signature checks fail closed until a secret is configured.
            logger.warning("NYLAS_WEBHOOK_SECRET is not set; all webhook signatures will be rejected")

        if self.webhook.max_body_bytes <= 0:
            errors.append("WEBHOOK_MAX_BODY_BYTES must be positive")

        if self.main_app.timeout <= 0:
            errors.append("MAIN_APP_TIMEOUT must be positive")

        if self.cache.max_entries <= 0:
            errors.append("EVENT_CACHE_MAX_ENTRIES must be positive")

        if self.cache.ttl_hours <= 0:
            errors.append("EVENT_CACHE_TTL_HOURS must be positive")

        if not 0 < self.port < 65536:
            errors.append("PORT must be between 1 and 65535")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
