"""
Main application forwarding configuration.
"""

from dataclasses import dataclass


@dataclass
class MainAppConfig:
    """Where processed webhook events are forwarded."""

    url: str = ""
    process_path: str = "/api/webhooks/nylas/process"
    timeout: float = 5.0
    source: str = "nylas-webhooks-service"

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def process_url(self) -> str:
        return f"{self.url.rstrip('/')}{self.process_path}"
