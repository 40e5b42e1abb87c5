import json

import httpx
import pytest
import respx

from src.core.config import MainAppConfig
from src.integrations.main_app import MainAppClient
from src.webhooks.models import WebhookDelta

PROCESS_URL = "http://main-app.local/api/webhooks/nylas/process"


@pytest.fixture
def delta() -> WebhookDelta:
    return WebhookDelta.model_validate(
        {
            "id": "e1",
            "type": "message.created",
            "time": 1714557600,
            "data": {"object": {"id": "m1", "subject": "Hi"}, "grant_id": "g1"},
        }
    )


@pytest.fixture
def client() -> MainAppClient:
    return MainAppClient(MainAppConfig(url="http://main-app.local/", timeout=1.0))


@pytest.mark.asyncio
async def test_forward_posts_delta(client: MainAppClient, delta: WebhookDelta) -> None:
    async with respx.mock:
        route = respx.post(PROCESS_URL).mock(return_value=httpx.Response(200, json={"ok": True}))

        assert await client.forward(delta) is True

        request = route.calls.last.request
        assert request.headers["X-Webhook-Source"] == "nylas-webhooks-service"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {
            "id": "e1",
            "type": "message.created",
            "time": 1714557600,
            "data": {"object": {"id": "m1", "subject": "Hi"}, "grant_id": "g1"},
        }


@pytest.mark.asyncio
async def test_forward_error_status_returns_false(client: MainAppClient, delta: WebhookDelta) -> None:
    async with respx.mock:
        respx.post(PROCESS_URL).mock(return_value=httpx.Response(500, json={"error": "boom"}))

        assert await client.forward(delta) is False


@pytest.mark.asyncio
async def test_forward_connection_error_returns_false(client: MainAppClient, delta: WebhookDelta) -> None:
    async with respx.mock:
        respx.post(PROCESS_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        assert await client.forward(delta) is False


@pytest.mark.asyncio
async def test_forward_timeout_returns_false(client: MainAppClient, delta: WebhookDelta) -> None:
    async with respx.mock:
        respx.post(PROCESS_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        assert await client.forward(delta) is False


@pytest.mark.asyncio
async def test_forward_disabled_without_url(delta: WebhookDelta) -> None:
    client = MainAppClient(MainAppConfig(url=""))

    async with respx.mock(assert_all_called=False) as mock:
        route = mock.post(PROCESS_URL).mock(return_value=httpx.Response(200))

        assert await client.forward(delta) is False
        assert not route.called


def test_process_url_joins_base_and_path() -> None:
    assert MainAppConfig(url="http://app:3000/").process_url == "http://app:3000/api/webhooks/nylas/process"
    assert MainAppConfig(url="http://app:3000", process_path="/hooks").process_url == "http://app:3000/hooks"
