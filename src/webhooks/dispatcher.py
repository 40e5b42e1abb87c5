from enum import Enum

import structlog

from src.cache.event_cache import EventCacheStore
from src.core.models import EventType
from src.integrations.main_app import MainAppClient
from src.webhooks.handlers.base import DeltaHandler
from src.webhooks.handlers.calendar import CalendarDeltaHandler
from src.webhooks.handlers.contact import ContactDeltaHandler
from src.webhooks.handlers.forwarding import ForwardingDeltaHandler
from src.webhooks.handlers.grant import GrantDeltaHandler
from src.webhooks.handlers.message import MessageDeltaHandler
from src.webhooks.models import WebhookDelta

logger = structlog.get_logger()


class DispatchStatus(str, Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"


class WebhookDispatcher:
    """
    Dispatches webhook deltas to registered DeltaHandler instances.

    Routing is an explicit table from EventType to handler. Deltas whose type
    is not in the table go to the fallback handler if one is set, and are
    otherwise logged and skipped: new event types can arrive before code to
    handle them is deployed.
    """

    def __init__(self):
        self._handlers: dict[EventType, DeltaHandler] = {}
        self._fallback: DeltaHandler | None = None

    def register_handler(self, event_type: EventType, handler: DeltaHandler) -> None:
        """
        Registers a handler instance for a specific event type.

        Args:
            event_type: The EventType to handle (e.g., EventType.MESSAGE_CREATED).
            handler: An instance of a class that implements the DeltaHandler interface.
        """
        if event_type in self._handlers:
            logger.warning("handler_overridden", event_type=event_type.value)
        self._handlers[event_type] = handler
        logger.debug("handler_registered", event_type=event_type.value, handler=handler.__class__.__name__)

    def register_fallback(self, handler: DeltaHandler) -> None:
        """Sets the handler used for event types with no registered handler."""
        self._fallback = handler

    def handler_for(self, delta: WebhookDelta) -> DeltaHandler | None:
        event_type = delta.event_type
        if event_type is not None and event_type in self._handlers:
            return self._handlers[event_type]
        return self._fallback

    @property
    def registered_event_types(self) -> list[EventType]:
        return list(self._handlers)

    async def dispatch(self, delta: WebhookDelta) -> DispatchStatus:
        """
        Runs the handler for a delta.

        Handler exceptions propagate to the caller, which owns per-delta isolation.

        Returns:
            PROCESSED if a handler ran, SKIPPED if the type is unhandled.
        """
        handler = self.handler_for(delta)

        if handler is None:
            logger.warning("unhandled_event_type", event_id=delta.id, event_type=delta.type)
            return DispatchStatus.SKIPPED

        logger.debug(
            "dispatching_delta",
            event_id=delta.id,
            event_type=delta.type,
            handler=handler.__class__.__name__,
        )
        await handler.handle(delta)
        return DispatchStatus.PROCESSED


def build_dispatcher(
    cache: EventCacheStore,
    forwarder: MainAppClient | None = None,
    cache_ttl_hours: float = 24,
) -> WebhookDispatcher:
    """Create a dispatcher with the default handler table."""
    calendar_handler = CalendarDeltaHandler(cache, forwarder, ttl_hours=cache_ttl_hours)
    message_handler = MessageDeltaHandler(cache, forwarder, ttl_hours=cache_ttl_hours)
    contact_handler = ContactDeltaHandler(cache, forwarder, ttl_hours=cache_ttl_hours)
    grant_handler = GrantDeltaHandler(cache, forwarder)

    handlers: dict[EventType, DeltaHandler] = {
        EventType.CALENDAR_CREATED: calendar_handler,
        EventType.CALENDAR_UPDATED: calendar_handler,
        EventType.CALENDAR_DELETED: calendar_handler,
        EventType.EVENT_CREATED: calendar_handler,
        EventType.EVENT_UPDATED: calendar_handler,
        EventType.EVENT_DELETED: calendar_handler,
        EventType.MESSAGE_CREATED: message_handler,
        EventType.MESSAGE_UPDATED: message_handler,
        EventType.MESSAGE_DELETED: message_handler,
        EventType.EMAIL_CREATED: message_handler,
        EventType.EMAIL_UPDATED: message_handler,
        EventType.EMAIL_DELETED: message_handler,
        EventType.CONTACT_CREATED: contact_handler,
        EventType.CONTACT_UPDATED: contact_handler,
        EventType.CONTACT_DELETED: contact_handler,
        EventType.GRANT_CREATED: grant_handler,
        EventType.GRANT_UPDATED: grant_handler,
        EventType.GRANT_EXPIRED: grant_handler,
        EventType.GRANT_DELETED: grant_handler,
    }

    dispatcher = WebhookDispatcher()
    for event_type, handler in handlers.items():
        dispatcher.register_handler(event_type, handler)

    if forwarder is not None:
        forwarding_handler = ForwardingDeltaHandler(forwarder)
        dispatcher.register_handler(EventType.THREAD_REPLIED, forwarding_handler)
        dispatcher.register_fallback(forwarding_handler)

    return dispatcher
