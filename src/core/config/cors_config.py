"""
CORS configuration.
"""

from dataclasses import dataclass, field


@dataclass
class CORSConfig:
    """Origins and headers allowed to call the webhook endpoints from a browser."""

    headers: list[str] = field(default_factory=lambda: ["*"])
    origins: list[str] = field(default_factory=lambda: ["*"])
