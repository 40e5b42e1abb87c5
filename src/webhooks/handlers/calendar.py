from typing import Any

from src.core.models import ResourceType
from src.webhooks.handlers.base import CachedResourceHandler


class CalendarDeltaHandler(CachedResourceHandler):
    """Handler for calendar and calendar-event deltas (`calendar.*`, `event.*`)."""

    resource_type = ResourceType.CALENDAR

    def extract_fields(self, resource: dict[str, Any]) -> dict[str, Any]:
        when = resource.get("when") or {}
        return {
            "title": resource.get("title"),
            "start_time": when.get("start_time"),
            "end_time": when.get("end_time"),
            "participants": resource.get("participants"),
            "status": resource.get("status"),
            "raw": resource,
        }
