"""
Candidate Locator - Run one concrete query against the live document.

Returns at most one element per call. Structural queries take the first of
possibly many matches. Text scans have no native driver primitive, so the
first matching node is tagged with a one-off attribute, re-queried to get a
stable handle, and untagged again inside a scope that always releases.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, TYPE_CHECKING
import logging
import uuid

from element_resolver.engine.strategies import LocatorKind, css_string

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IPage, IElement

logger = logging.getLogger(__name__)


MARKER_ATTRIBUTE = "data-element-resolver-marker"

# Tags the first innermost element whose rendered text contains the target.
# Text inside non-rendered containers counts for neither the container nor
# its ancestors. Returns whether a node was tagged.
MARK_TEXT_MATCH_JS = r'''
([text, attr, token]) => {
    const skip = new Set(['HTML', 'HEAD', 'SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE', 'TITLE']);
    const cache = new Map();
    const rendered = el => {
        if (cache.has(el)) return cache.get(el);
        let out = '';
        if (!skip.has(el.tagName)) {
            for (const child of el.childNodes) {
                if (child.nodeType === Node.TEXT_NODE) out += child.data;
                else if (child.nodeType === Node.ELEMENT_NODE) out += rendered(child);
            }
        }
        cache.set(el, out);
        return out;
    };
    const contains = el => !skip.has(el.tagName) && rendered(el).includes(text);
    const match = [...document.querySelectorAll('*')].find(
        el => contains(el) && ![...el.children].some(contains)
    );
    if (!match) return false;
    match.setAttribute(attr, token);
    return true;
}
'''

UNMARK_JS = r'''
([attr, token]) => {
    const marked = document.querySelectorAll(`[${attr}="${token}"]`);
    marked.forEach(el => el.removeAttribute(attr));
    return marked.length;
}
'''


def marker_selector(token: str) -> str:
    """Selector for the node tagged with ``token``."""
    return f"[{MARKER_ATTRIBUTE}={css_string(token)}]"


@asynccontextmanager
async def text_marker(page: "IPage", text: str) -> AsyncIterator[Optional[str]]:
    """
    Tag the first node containing ``text`` for the duration of the block.
    
    Yields the selector of the tagged node, or None when nothing matched.
    The tag is removed on every exit path.
    """
    token = uuid.uuid4().hex
    try:
        marked = await page.evaluate(MARK_TEXT_MATCH_JS, [text, MARKER_ATTRIBUTE, token])
        yield marker_selector(token) if marked else None
    finally:
        removed = await page.evaluate(UNMARK_JS, [MARKER_ATTRIBUTE, token])
        logger.debug(f"Removed text marker {token} from {removed} node(s)")


class CandidateLocator:
    """
    Executes translated queries against one page.
    
    Example:
        >>> locator = CandidateLocator(page)
        >>> element = await locator.locate('[name="email"]', LocatorKind.NATIVE)
    """
    
    def __init__(self, page: "IPage"):
        self._page = page
    
    async def locate(self, query: str, kind: LocatorKind) -> Optional["IElement"]:
        """
        Find at most one element for ``query``.
        
        Driver errors propagate; the retry controller records them.
        """
        if kind is LocatorKind.STRUCTURAL:
            return await self._locate_structural(query)
        if kind is LocatorKind.TEXT_SCAN:
            return await self._locate_by_text(query)
        return await self._page.query_selector(query)
    
    async def _locate_structural(self, query: str) -> Optional["IElement"]:
        elements = await self._page.query_selector_all(f"xpath={query}")
        if not elements:
            return None
        if len(elements) > 1:
            logger.debug(f"XPath {query!r} matched {len(elements)} nodes, using the first")
        return elements[0]
    
    async def _locate_by_text(self, text: str) -> Optional["IElement"]:
        async with text_marker(self._page, text) as selector:
            if selector is None:
                return None
            return await self._page.query_selector(selector)
