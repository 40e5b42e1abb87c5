import httpx
import structlog

from src.core.config.main_app_config import MainAppConfig
from src.webhooks.models import WebhookDelta

logger = structlog.get_logger(__name__)


class MainAppClient:
    """Forwards processed webhook deltas to the main application."""

    def __init__(self, config: MainAppConfig):
        self.config = config
        self.headers = {
            "Content-Type": "application/json",
            "X-Webhook-Source": config.source,
        }

    async def forward(self, delta: WebhookDelta) -> bool:
        """
        POST a delta to the main app's processing endpoint.

        Delivery failures are logged, not raised: the delta has already been
        applied locally and the main app reconciles on later deliveries.

        Returns:
            True if the main app accepted the delta.
        """
        if not self.config.enabled:
            logger.debug("main_app_forward_skipped", event_id=delta.id, reason="MAIN_APP_URL not set")
            return False

        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            try:
                response = await client.post(self.config.process_url, headers=self.headers, json=delta.to_wire())
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(
                    "main_app_forward_rejected",
                    event_id=delta.id,
                    status_code=e.response.status_code,
                    response_body=e.response.text,
                )
                return False
            except httpx.HTTPError as e:
                logger.error("main_app_forward_failed", event_id=delta.id, error=str(e))
                return False

        logger.info("main_app_forward_succeeded", event_id=delta.id, status_code=response.status_code)
        return True
