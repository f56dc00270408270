"""
Browser-related exceptions.
"""

from element_resolver.exceptions.base import ElementResolverError


class BrowserError(ElementResolverError):
    """Base exception for browser-related errors."""
    pass


class BrowserLaunchError(BrowserError):
    """
    Error launching the browser.
    
    Raised when the browser fails to start, which could be due to:
    - Missing browser binaries
    - Invalid browser options
    - Resource constraints
    """
    pass


class BrowserConnectionError(BrowserError):
    """
    Error connecting to the browser.
    
    Raised when the connection to the browser is lost or cannot be established.
    """
    pass


class PageError(BrowserError):
    """Base exception for page-related errors."""
    pass


class NoPageAttachedError(PageError):
    """
    No page is attached to the caller.
    
    Raised before any lookup is attempted when there is no live document
    to query. Never retried.
    """
    
    def __init__(self, message: str = "No page open. Call navigate first."):
        super().__init__(message)


class NavigationError(PageError):
    """
    Error during page navigation.
    
    Raised when navigation fails (invalid URL, network error, timeout).
    """
    
    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message, {"url": url, "status_code": status_code})
        self.url = url
        self.status_code = status_code


class ElementNotFoundError(PageError):
    """
    Element not found on the page.
    
    Raised when an element matching the selector cannot be found.
    """
    
    def __init__(self, message: str, selector: str, details: dict | None = None):
        super().__init__(message, {"selector": selector, **(details or {})})
        self.selector = selector


class ElementNotVisibleError(PageError):
    """
    Element exists but is not visible.
    
    Raised when an element is found but its computed style hides it.
    """
    
    def __init__(self, message: str, selector: str):
        super().__init__(message, {"selector": selector})
        self.selector = selector
