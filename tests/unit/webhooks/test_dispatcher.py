from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.models import EventType
from src.webhooks.dispatcher import DispatchStatus, WebhookDispatcher, build_dispatcher
from src.webhooks.handlers.calendar import CalendarDeltaHandler
from src.webhooks.handlers.contact import ContactDeltaHandler
from src.webhooks.handlers.forwarding import ForwardingDeltaHandler
from src.webhooks.handlers.grant import GrantDeltaHandler
from src.webhooks.handlers.message import MessageDeltaHandler
from src.webhooks.models import WebhookDelta


def make_delta(event_type: str, resource_id: str = "r1", grant_id: str = "g1") -> WebhookDelta:
    return WebhookDelta.model_validate(
        {"id": f"{event_type}-{resource_id}", "type": event_type, "data": {"object": {"id": resource_id}, "grant_id": grant_id}}
    )


def mock_handler() -> MagicMock:
    handler = MagicMock()
    handler.handle = AsyncMock()
    return handler


class TestWebhookDispatcher:
    """Test routing of deltas to handlers."""

    @pytest.mark.asyncio
    async def test_dispatch_to_registered_handler(self) -> None:
        dispatcher = WebhookDispatcher()
        handler = mock_handler()
        dispatcher.register_handler(EventType.MESSAGE_CREATED, handler)
        delta = make_delta("message.created")

        status = await dispatcher.dispatch(delta)

        assert status is DispatchStatus.PROCESSED
        handler.handle.assert_awaited_once_with(delta)

    @pytest.mark.asyncio
    async def test_unknown_type_is_skipped(self) -> None:
        dispatcher = WebhookDispatcher()
        handler = mock_handler()
        dispatcher.register_handler(EventType.MESSAGE_CREATED, handler)

        status = await dispatcher.dispatch(make_delta("folder.created"))

        assert status is DispatchStatus.SKIPPED
        handler.handle.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_known_but_unregistered_type_is_skipped(self) -> None:
        dispatcher = WebhookDispatcher()

        assert await dispatcher.dispatch(make_delta("contact.updated")) is DispatchStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_fallback_handles_unknown_types(self) -> None:
        dispatcher = WebhookDispatcher()
        fallback = mock_handler()
        dispatcher.register_fallback(fallback)
        delta = make_delta("folder.created")

        status = await dispatcher.dispatch(delta)

        assert status is DispatchStatus.PROCESSED
        fallback.handle.assert_awaited_once_with(delta)

    @pytest.mark.asyncio
    async def test_handler_exceptions_propagate(self) -> None:
        dispatcher = WebhookDispatcher()
        handler = mock_handler()
        handler.handle.side_effect = RuntimeError("db down")
        dispatcher.register_handler(EventType.MESSAGE_CREATED, handler)

        with pytest.raises(RuntimeError, match="db down"):
            await dispatcher.dispatch(make_delta("message.created"))

    def test_register_overrides_existing_handler(self) -> None:
        dispatcher = WebhookDispatcher()
        first, second = mock_handler(), mock_handler()
        dispatcher.register_handler(EventType.GRANT_EXPIRED, first)
        dispatcher.register_handler(EventType.GRANT_EXPIRED, second)

        assert dispatcher.handler_for(make_delta("grant.expired")) is second


class TestBuildDispatcher:
    """Test the default handler table."""

    @pytest.mark.parametrize(
        ("event_type", "handler_class"),
        [
            ("calendar.created", CalendarDeltaHandler),
            ("calendar.deleted", CalendarDeltaHandler),
            ("event.updated", CalendarDeltaHandler),
            ("message.created", MessageDeltaHandler),
            ("email.deleted", MessageDeltaHandler),
            ("contact.updated", ContactDeltaHandler),
            ("grant.expired", GrantDeltaHandler),
            ("grant.created", GrantDeltaHandler),
        ],
    )
    def test_event_types_route_to_resource_handlers(self, event_cache, event_type: str, handler_class: type) -> None:
        dispatcher = build_dispatcher(event_cache)

        assert isinstance(dispatcher.handler_for(make_delta(event_type)), handler_class)

    def test_without_forwarder_unknown_types_have_no_handler(self, event_cache) -> None:
        dispatcher = build_dispatcher(event_cache)

        assert dispatcher.handler_for(make_delta("folder.created")) is None
        assert dispatcher.handler_for(make_delta("thread.replied")) is None

    def test_with_forwarder_unknown_types_are_forwarded(self, event_cache) -> None:
        dispatcher = build_dispatcher(event_cache, forwarder=MagicMock())

        assert isinstance(dispatcher.handler_for(make_delta("folder.created")), ForwardingDeltaHandler)
        assert isinstance(dispatcher.handler_for(make_delta("thread.replied")), ForwardingDeltaHandler)

    def test_cache_ttl_is_passed_to_resource_handlers(self, event_cache) -> None:
        dispatcher = build_dispatcher(event_cache, cache_ttl_hours=6)

        assert dispatcher.handler_for(make_delta("message.created")).ttl_hours == 6
