"""
Retry helper for startup-time calls to external services.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> T:
    """
    Await operation() until it succeeds or attempts run out.
    
    Delay before retry n (0-based) is base_delay * 2**n, so the defaults
    wait 2s and then 4s.
    
    Args:
        operation: Zero-argument coroutine factory
        attempts: Maximum number of calls
        base_delay: First delay in seconds
        retry_on: Exception types that trigger a retry
        description: Name used in log messages
        sleep: Awaitable sleep function
    
    Returns:
        Result of the first successful call
    
    Raises:
        The last exception once all attempts failed
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    
    for attempt in range(attempts):
        try:
            return await operation()
        except retry_on as e:
            if attempt == attempts - 1:
                logger.error(f"{description} failed after {attempts} attempts: {e}")
                raise
            delay = base_delay * (2 ** attempt)
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{attempts}), "
                f"retrying in {delay:.1f}s: {e}"
            )
            await sleep(delay)
