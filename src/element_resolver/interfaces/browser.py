"""
Browser Interface - Abstract base classes for the browser driver.

This module defines the contract a driver (Playwright today) must satisfy
for the resolver and the element tools to work against it: expression
queries, script evaluation, computed-style inspection and snapshots.

Example:
    >>> from element_resolver.browsers import PlaywrightBrowser
    >>> browser = PlaywrightBrowser()
    >>> await browser.launch(headless=True)
    >>> page = await browser.new_page()
    >>> await page.goto("https://example.com")
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, List, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class BrowserType(Enum):
    """Supported browser types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


@dataclass
class ElementDetails:
    """
    Serializable description of a located DOM element.
    
    Unlike IElement this holds no browser reference and survives navigation.
    
    Attributes:
        tag_name: The HTML tag name (e.g., 'div', 'button', 'input')
        attributes: Dictionary of element attributes
        text_content: Trimmed text content (at most 100 characters)
        bounding_box: Position and size in CSS pixels
        is_visible: Whether the computed style shows the element
        outer_html: Element HTML, when requested
        context_html: Parent element HTML, when requested
    """
    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text_content: str = ""
    bounding_box: Optional[Dict[str, float]] = None
    is_visible: bool = True
    outer_html: Optional[str] = None
    context_html: Optional[str] = None

    @property
    def id(self) -> Optional[str]:
        """Get the element's id attribute."""
        return self.attributes.get("id")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tag_name": self.tag_name,
            "id": self.id or "",
            "class_name": self.attributes.get("class", ""),
            "text_content": self.text_content,
            "attributes": self.attributes,
            "bounding_box": self.bounding_box,
            "is_visible": self.is_visible,
        }
        if self.outer_html is not None:
            data["outer_html"] = self.outer_html
        if self.context_html is not None:
            data["context_html"] = self.context_html
        return data


class IElement(ABC):
    """
    Abstract interface for a live DOM element reference.
    
    A reference is only valid until the next navigation or a DOM mutation
    that removes the node; callers must not keep it across page transitions.
    """

    @abstractmethod
    async def click(self, **options: Any) -> None:
        """Click on this element."""
        ...

    @abstractmethod
    async def type(self, text: str, delay: int = 0, **options: Any) -> None:
        """
        Type text into this element, one key at a time.
        
        Args:
            text: Text to type
            delay: Delay between keystrokes in milliseconds
        """
        ...

    @abstractmethod
    async def get_attribute(self, name: str) -> Optional[str]:
        """Get an attribute value, or None if not present."""
        ...

    @abstractmethod
    async def text_content(self) -> Optional[str]:
        """Get the text content of this element."""
        ...

    @abstractmethod
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """
        Run a JavaScript function with this element as its first argument.
        
        Args:
            expression: Function source, e.g. ``"el => el.tagName"``
            arg: Optional JSON-serializable second argument
            
        Returns:
            The JSON-serializable result
        """
        ...

    @abstractmethod
    async def bounding_box(self) -> Optional[Dict[str, float]]:
        """Get position and size, or None when the element is not rendered."""
        ...

    @abstractmethod
    async def scroll_into_view(self) -> None:
        """Scroll the element into the center of the viewport."""
        ...


class IPage(ABC):
    """
    Abstract interface for browser page operations needed by the resolver.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Get the current page URL."""
        ...

    @abstractmethod
    def is_closed(self) -> bool:
        """Whether the page has been closed."""
        ...

    @abstractmethod
    async def goto(self, url: str, **options: Any) -> None:
        """
        Navigate to a URL.
        
        Args:
            url: The URL to navigate to
            **options: Browser-specific navigation options (e.g., wait_until, timeout)
        """
        ...

    @abstractmethod
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """
        Find the first element matching a selector.
        
        Args:
            selector: CSS selector or engine-prefixed selector (``xpath=...``)
            
        Returns:
            The matching element, or None if not found
        """
        ...

    @abstractmethod
    async def query_selector_all(self, selector: str) -> List[IElement]:
        """Find all elements matching a selector, in document order."""
        ...

    @abstractmethod
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """
        Execute JavaScript in the page context.
        
        Args:
            expression: JavaScript expression or function to execute
            arg: Optional JSON-serializable argument for the function
            
        Returns:
            The JSON-serializable result
        """
        ...

    @abstractmethod
    async def content(self) -> str:
        """Get the full HTML content of the page."""
        ...

    @abstractmethod
    async def screenshot(
        self,
        path: Optional["Path"] = None,
        full_page: bool = False,
        **options: Any,
    ) -> bytes:
        """
        Take a screenshot of the page.
        
        Returns:
            The screenshot as PNG bytes
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close this page."""
        ...


class IBrowser(ABC):
    """
    Abstract interface for browser management.
    
    Session start/stop lives here, outside the resolver.
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the browser is connected and running."""
        ...

    @abstractmethod
    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """Launch a browser instance."""
        ...

    @abstractmethod
    async def new_page(self, **options: Any) -> IPage:
        """Create a new browser page/tab."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the browser and cleanup resources."""
        ...
