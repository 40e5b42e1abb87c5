import hashlib
import hmac

import pytest

from src.webhooks.auth import verify_webhook_signature

SECRET = "nylas-secret"
BODY = b'{"deltas":[{"id":"e1","type":"message.created","data":{"object":{"id":"m1"},"grant_id":"g1"}}]}'


def _hmac(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()


class TestVerifyWebhookSignature:
    """Test HMAC-SHA256 signature verification."""

    @pytest.mark.parametrize(
        ("body", "secret"),
        [
            (BODY, SECRET),
            (b"", SECRET),
            (b"\x00\xff binary", "another-secret"),
            ('{"unicode": "café"}'.encode(), "sécret"),
        ],
    )
    def test_valid_signature_verifies(self, body: bytes, secret: str) -> None:
        """A signature computed with the shared secret is accepted."""
        assert verify_webhook_signature(body, _hmac(body, secret), secret) is True

    def test_str_body_is_utf8_encoded(self) -> None:
        """A str body verifies against the HMAC of its UTF-8 bytes."""
        text = '{"subject": "résumé"}'
        assert verify_webhook_signature(text, _hmac(text.encode("utf-8"), SECRET), SECRET) is True

    def test_every_single_bit_mutation_is_rejected(self) -> None:
        """Flipping any single bit of the signature makes it invalid."""
        signature = _hmac(BODY, SECRET)

        for position, char in enumerate(signature):
            for bit in range(7):
                mutated = signature[:position] + chr(ord(char) ^ (1 << bit)) + signature[position + 1 :]
                assert verify_webhook_signature(BODY, mutated, SECRET) is False, (position, bit)

    def test_empty_secret_always_rejects(self) -> None:
        """An unset secret fails closed, even for a signature made with an empty key."""
        assert verify_webhook_signature(BODY, _hmac(BODY, ""), "") is False
        assert verify_webhook_signature(BODY, "anything", "") is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature_rejects(self, signature: str | None) -> None:
        assert verify_webhook_signature(BODY, signature, SECRET) is False

    def test_wrong_secret_rejects(self) -> None:
        assert verify_webhook_signature(BODY, _hmac(BODY, "other-secret"), SECRET) is False

    def test_modified_body_rejects(self) -> None:
        """Re-serialized JSON with different whitespace no longer verifies."""
        signature = _hmac(BODY, SECRET)
        reserialized = BODY.replace(b",", b", ")

        assert verify_webhook_signature(reserialized, signature, SECRET) is False

    def test_uppercase_hex_rejects(self) -> None:
        """Comparison is exact; Nylas sends lowercase hex."""
        assert verify_webhook_signature(BODY, _hmac(BODY, SECRET).upper(), SECRET) is False

    def test_non_ascii_signature_rejects_without_raising(self) -> None:
        assert verify_webhook_signature(BODY, "é" * 64, SECRET) is False
