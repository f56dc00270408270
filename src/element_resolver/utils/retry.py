"""
Retry utilities with exponential backoff.
"""

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.
    
    Attributes:
        max_attempts: Maximum number of attempts
        initial_delay_ms: Delay after the first failed attempt
        max_delay_ms: Maximum delay between attempts
        backoff_multiplier: Multiplier for exponential backoff
        retry_on: Exception types to retry on
    """
    max_attempts: int = 3
    initial_delay_ms: float = 100
    max_delay_ms: float = 2000
    backoff_multiplier: float = 1.5
    retry_on: Tuple[Type[Exception], ...] = (Exception,)
    
    def delay_ms(self, attempt_index: int) -> float:
        """
        Delay to wait after the failed attempt at ``attempt_index`` (0-based).
        
        Returns 0 for the last allowed attempt, which never sleeps.
        """
        if not self.has_next(attempt_index):
            return 0.0
        return min(
            self.initial_delay_ms * self.backoff_multiplier ** attempt_index,
            self.max_delay_ms,
        )
    
    def has_next(self, attempt_index: int) -> bool:
        """Whether another attempt follows ``attempt_index``."""
        return attempt_index < self.max_attempts - 1


def retry(
    max_attempts: int = 3,
    initial_delay_ms: float = 100,
    max_delay_ms: float = 2000,
    backoff_multiplier: float = 1.5,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for retrying async functions with exponential backoff.
    
    Example:
        >>> @retry(max_attempts=3, retry_on=(NavigationError,))
        ... async def open_page():
        ...     ...
    """
    config = RetryConfig(
        max_attempts=max_attempts,
        initial_delay_ms=initial_delay_ms,
        max_delay_ms=max_delay_ms,
        backoff_multiplier=backoff_multiplier,
        retry_on=retry_on,
    )
    
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_async(func, config, *args, **kwargs)
        return wrapper
    
    return decorator


async def retry_async(
    func: Callable[..., Awaitable[T]],
    config: RetryConfig,
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Execute an async function with retry logic.
    
    Raises:
        The last exception if all retries fail
    """
    last_exception: Optional[Exception] = None
    
    for attempt in range(config.max_attempts):
        try:
            return await func(*args, **kwargs)
        except config.retry_on as e:
            last_exception = e
            if not config.has_next(attempt):
                break
            
            delay_ms = config.delay_ms(attempt)
            logger.warning(
                f"Attempt {attempt + 1}/{config.max_attempts} failed: {e}. "
                f"Retrying in {delay_ms:.0f}ms..."
            )
            await asyncio.sleep(delay_ms / 1000)
    
    raise last_exception  # type: ignore
