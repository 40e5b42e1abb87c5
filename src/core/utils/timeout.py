"""
Timeout utilities for async operations.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

import structlog

logger = structlog.get_logger()


async def execute_with_timeout(
    awaitable: Awaitable[Any],
    timeout: float | None = 30.0,
    timeout_message: str | None = None,
) -> Any:
    """
    Await an operation, bounded by `timeout` seconds.

    Args:
        awaitable: The coroutine to execute
        timeout: Timeout in seconds, or None for no bound
        timeout_message: Custom message for the timeout exception

    Returns:
        The result of the awaitable

    Raises:
        TimeoutError: If the operation times out
    """
    if timeout is None:
        return await awaitable

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as err:
        msg = timeout_message or f"Operation timed out after {timeout} seconds"
        logger.error("operation_timed_out", timeout=timeout, message=msg)
        raise TimeoutError(msg) from err
