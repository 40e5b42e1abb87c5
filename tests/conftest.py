"""
Pytest configuration: project root on sys.path and shared webhook fixtures.
"""

import hashlib
import hmac
import json
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.cache.event_cache import InMemoryEventCache  # noqa: E402
from src.core.config import Config  # noqa: E402

WEBHOOK_SECRET = "test-webhook-secret"


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Hex HMAC-SHA256 signature, as Nylas computes it."""
    return hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode()


@pytest.fixture
def test_config() -> Config:
    """Config with a known webhook secret and forwarding disabled."""
    config = Config()
    config.webhook.secret = WEBHOOK_SECRET
    config.webhook.handler_timeout = 5.0
    config.main_app.url = ""
    config.environment = "test"
    return config


@pytest.fixture
def event_cache() -> InMemoryEventCache:
    return InMemoryEventCache(max_entries=100)


@pytest.fixture
def message_created_payload() -> dict[str, Any]:
    """Single message.created delta for grant g1."""
    return {
        "deltas": [
            {
                "id": "e1",
                "type": "message.created",
                "data": {"object": {"id": "m1"}, "grant_id": "g1"},
            }
        ]
    }


@pytest.fixture
def sign_payload():
    """Serialize a payload and build headers carrying its signature."""

    def _sign(payload: dict[str, Any], secret: str = WEBHOOK_SECRET) -> tuple[bytes, dict[str, str]]:
        body = encode(payload)
        headers = {"X-Nylas-Signature": sign(body, secret), "Content-Type": "application/json"}
        return body, headers

    return _sign
