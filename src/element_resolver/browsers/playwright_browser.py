"""
Playwright Browser - Implementation of the browser interfaces using Playwright.
"""

from typing import Any, Dict, List, Optional
import logging

from element_resolver.interfaces.browser import (
    IBrowser,
    IPage,
    IElement,
    BrowserType,
)
from element_resolver.exceptions.browser import (
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
)

logger = logging.getLogger(__name__)


class PlaywrightElement(IElement):
    """
    Playwright implementation of IElement.
    
    Wraps a Playwright ElementHandle.
    """
    
    def __init__(self, element: Any, selector: str):
        """
        Initialize the element wrapper.
        
        Args:
            element: Playwright ElementHandle
            selector: The selector used to find this element
        """
        self._element = element
        self._selector = selector
    
    @property
    def selector(self) -> str:
        return self._selector
    
    async def click(self, **options: Any) -> None:
        """Click on this element."""
        await self._element.click(**options)
    
    async def type(self, text: str, delay: int = 0, **options: Any) -> None:
        """Type text."""
        await self._element.type(text, delay=delay, **options)
    
    async def get_attribute(self, name: str) -> Optional[str]:
        """Get an attribute value."""
        return await self._element.get_attribute(name)
    
    async def text_content(self) -> Optional[str]:
        """Get text content."""
        return await self._element.text_content()
    
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Run a function against this element."""
        return await self._element.evaluate(expression, arg)
    
    async def bounding_box(self) -> Optional[Dict[str, float]]:
        """Get position and size."""
        return await self._element.bounding_box()
    
    async def scroll_into_view(self) -> None:
        """Scroll the element to the center of the viewport."""
        await self._element.evaluate(
            "el => el.scrollIntoView({block: 'center', inline: 'center'})"
        )
    
    def __repr__(self) -> str:
        return f"PlaywrightElement(selector={self._selector!r})"


class PlaywrightPage(IPage):
    """
    Playwright implementation of IPage.
    
    Wraps a Playwright Page for navigation and querying.
    """
    
    def __init__(self, page: Any):
        """
        Initialize the page wrapper.
        
        Args:
            page: Playwright Page object
        """
        self._page = page
    
    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url
    
    def is_closed(self) -> bool:
        """Check if the page is closed."""
        return self._page.is_closed()
    
    async def goto(self, url: str, **options: Any) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url, **options)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)
    
    async def query_selector(self, selector: str) -> Optional[IElement]:
        """Find first matching element."""
        element = await self._page.query_selector(selector)
        if element:
            return PlaywrightElement(element, selector)
        return None
    
    async def query_selector_all(self, selector: str) -> List[IElement]:
        """Find all matching elements."""
        elements = await self._page.query_selector_all(selector)
        return [PlaywrightElement(el, selector) for el in elements]
    
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Execute JavaScript."""
        return await self._page.evaluate(expression, arg)
    
    async def content(self) -> str:
        """Get page HTML."""
        return await self._page.content()
    
    async def screenshot(
        self,
        path: Optional[Any] = None,
        full_page: bool = False,
        **options: Any,
    ) -> bytes:
        """Take screenshot."""
        return await self._page.screenshot(path=path, full_page=full_page, **options)
    
    async def set_content(self, html: str, **options: Any) -> None:
        """Replace the document with the given HTML."""
        await self._page.set_content(html, **options)
    
    async def close(self) -> None:
        """Close page."""
        await self._page.close()


class PlaywrightBrowser(IBrowser):
    """
    Playwright implementation of IBrowser.
    
    Example:
        >>> browser = PlaywrightBrowser()
        >>> await browser.launch(headless=True)
        >>> page = await browser.new_page()
        >>> await page.goto("https://example.com")
        >>> await browser.close()
    """
    
    def __init__(self):
        """Initialize the browser (not launched yet)."""
        self._playwright: Any = None
        self._browser: Any = None
        self._default_context: Any = None
    
    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()
    
    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch the browser.
        
        Args:
            headless: Whether to run headless
            browser_type: Type of browser to launch
            **options: Additional Playwright launch options
        """
        try:
            from playwright.async_api import async_playwright
            
            self._playwright = await async_playwright().start()
            
            browser_launchers = {
                BrowserType.CHROMIUM: self._playwright.chromium,
                BrowserType.FIREFOX: self._playwright.firefox,
                BrowserType.WEBKIT: self._playwright.webkit,
            }
            launcher = browser_launchers.get(browser_type, self._playwright.chromium)
            
            self._browser = await launcher.launch(
                headless=headless,
                **options,
            )
            
            logger.info(f"Launched {browser_type.value} browser (headless={headless})")
            
        except Exception as e:
            if self._playwright:
                await self._playwright.stop()
                self._playwright = None
            raise BrowserLaunchError(f"Failed to launch browser: {e}")
    
    async def new_page(self, **options: Any) -> PlaywrightPage:
        """
        Create a new page.
        
        Args:
            **options: Context options (viewport, etc.)
            
        Returns:
            New page instance
        """
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call launch() first.")
        
        if not self._default_context:
            self._default_context = await self._browser.new_context(**options)
        
        page = await self._default_context.new_page()
        return PlaywrightPage(page)
    
    async def close(self) -> None:
        """Close the browser and cleanup."""
        if self._default_context:
            await self._default_context.close()
            self._default_context = None
        
        if self._browser:
            await self._browser.close()
            self._browser = None
        
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        
        logger.info("Browser closed")
