"""
Utilities module - Common utility functions.
"""

from element_resolver.utils.logging import setup_logging
from element_resolver.utils.retry import retry, retry_async, RetryConfig

__all__ = [
    "setup_logging",
    "retry",
    "retry_async",
    "RetryConfig",
]
