"""
Webhook receiver configuration.
"""

from dataclasses import dataclass


@dataclass
class WebhookConfig:
    """Nylas webhook configuration."""

    secret: str = ""
    signature_header: str = "X-Nylas-Signature"
    handler_timeout: float | None = 30.0  # Seconds per delta handler; None disables the bound
    max_body_bytes: int = 1_048_576  # 1 MiB
