"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Element Resolver,
providing clear error types for different failure scenarios.
"""

from element_resolver.exceptions.base import (
    ElementResolverError,
    ConfigurationError,
)
from element_resolver.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    PageError,
    NoPageAttachedError,
    NavigationError,
    ElementNotFoundError,
    ElementNotVisibleError,
)
from element_resolver.exceptions.resolution import (
    StrategyExhaustedError,
    ResolutionFailedError,
)

__all__ = [
    # Base exceptions
    "ElementResolverError",
    "ConfigurationError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "PageError",
    "NoPageAttachedError",
    "NavigationError",
    "ElementNotFoundError",
    "ElementNotVisibleError",
    # Resolution exceptions
    "StrategyExhaustedError",
    "ResolutionFailedError",
]
