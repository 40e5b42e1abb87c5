from typing import Any

from src.core.models import ResourceType
from src.webhooks.handlers.base import CachedResourceHandler


class ContactDeltaHandler(CachedResourceHandler):
    """Handler for contact deltas (`contact.*`)."""

    resource_type = ResourceType.CONTACT

    def extract_fields(self, resource: dict[str, Any]) -> dict[str, Any]:
        return {
            "given_name": resource.get("given_name"),
            "surname": resource.get("surname"),
            "emails": resource.get("emails"),
            "phone_numbers": resource.get("phone_numbers"),
            "raw": resource,
        }
