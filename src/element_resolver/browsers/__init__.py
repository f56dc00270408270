"""
Browsers module - Browser driver implementations.
"""

from element_resolver.browsers.playwright_browser import (
    PlaywrightBrowser,
    PlaywrightPage,
    PlaywrightElement,
)

__all__ = [
    "PlaywrightBrowser",
    "PlaywrightPage",
    "PlaywrightElement",
]
