import time

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.errors import http_error_handler, utc_timestamp, webhook_error_handler
from src.api.middleware import BodySizeLimitMiddleware
from src.cache.event_cache import EventCacheStore
from src.core.config import config
from src.core.errors import WebhookError
from src.core.utils.logging import configure_logging
from src.webhooks.dependencies import dispatcher, get_event_cache
from src.webhooks.router import router as webhook_router

SERVICE_NAME = "nylas-webhooks"
SERVICE_VERSION = "1.0.0"

# --- Application Setup ---

configure_logging(config.logging)
logger = structlog.get_logger()

app = FastAPI(
    title="Nylas Webhooks Service",
    description="Receives Nylas webhooks, updates the event cache and forwards events to the main app.",
    version=SERVICE_VERSION,
)

_started_at = time.monotonic()

# --- Middleware ---

app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.webhook.max_body_bytes)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=config.cors.headers,
)

# --- Error Handlers ---

app.add_exception_handler(WebhookError, webhook_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)

# --- Include Routers ---

app.include_router(webhook_router, prefix="/webhooks", tags=["Nylas Webhooks"])

# --- Health and Info Endpoints ---


@app.get("/health", tags=["Health Check"])
async def health(cache: EventCacheStore = Depends(get_event_cache)):
    """A simple health check endpoint to confirm the service is running."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "timestamp": utc_timestamp(),
        "version": SERVICE_VERSION,
        "uptime": round(time.monotonic() - _started_at, 3),
        "cache": await cache.get_cache_stats(),
    }


@app.get("/info", tags=["Health Check"])
async def info():
    """Describe the service and the event types it routes."""
    endpoints = ["/webhooks", "/webhooks/verify"]
    if not config.is_production:
        endpoints.append("/webhooks/test (dev only)")

    return {
        "name": "Nylas Webhooks Service",
        "version": SERVICE_VERSION,
        "description": "FastAPI microservice for Nylas webhook processing",
        "endpoints": endpoints,
        "supportedEvents": [event_type.value for event_type in dispatcher.registered_event_types],
    }


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """Application startup logic."""
    config.validate()
    logger.info(
        "webhooks_service_starting",
        environment=config.environment,
        handlers=len(dispatcher.registered_event_types),
        forwarding_enabled=config.main_app.enabled,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=config.host, port=config.port, log_level=config.logging.level.lower())
