"""
Shared utilities for logging setup and timeout handling.
"""

from src.core.utils.logging import configure_logging
from src.core.utils.timeout import execute_with_timeout

__all__ = [
    "configure_logging",
    "execute_with_timeout",
]
