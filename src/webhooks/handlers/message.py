from typing import Any

from src.core.models import ResourceType
from src.webhooks.handlers.base import CachedResourceHandler


class MessageDeltaHandler(CachedResourceHandler):
    """Handler for email deltas (`message.*`, `email.*`)."""

    resource_type = ResourceType.MESSAGE

    def extract_fields(self, resource: dict[str, Any]) -> dict[str, Any]:
        return {
            "subject": resource.get("subject"),
            "from": resource.get("from"),
            "to": resource.get("to"),
            "body": resource.get("snippet") or resource.get("body"),
            "raw": resource,
        }
