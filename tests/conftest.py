"""
Pytest configuration and fixtures.

The fake page below understands exactly the queries and scripts the
resolver issues, so engine tests run without a browser.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from element_resolver.actions.inspection import (
    ELEMENT_DETAILS_JS,
    OUTER_HTML_JS,
    PARENT_HTML_JS,
)
from element_resolver.actions.interaction import CLEAR_VALUE_JS, SCROLL_POSITION_JS
from element_resolver.config import ResolverSettings, reset_settings
from element_resolver.engine.locator import MARK_TEXT_MATCH_JS, MARKER_ATTRIBUTE, UNMARK_JS
from element_resolver.engine.visibility import VISIBILITY_JS
from element_resolver.interfaces.browser import IElement, IPage


_ATTRIBUTE_SELECTOR = re.compile(r'^\[([\w-]+)(~?)="((?:[^"\\]|\\.)*)"\]$')


# Containers whose text is not rendered; mirrors the page-side text scan
SKIPPED_TAGS = {"HTML", "HEAD", "SCRIPT", "STYLE", "NOSCRIPT", "TEMPLATE", "TITLE"}


def _unescape(value: str) -> str:
    return value.replace('\\"', '"').replace("\\a ", "\n").replace("\\\\", "\\")


@dataclass
class FakeNode:
    """A DOM node in the fake document."""
    tag: str = "div"
    attrs: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    style: Dict[str, str] = field(default_factory=dict)
    present_after: int = 0  # number of queries before the node is attached
    value: str = ""
    clicks: int = 0
    scrolled: bool = False
    children: List["FakeNode"] = field(default_factory=list)
    
    def rendered_text(self) -> str:
        if self.tag.upper() in SKIPPED_TAGS:
            return ""
        return self.text + "".join(child.rendered_text() for child in self.children)
    
    def walk(self) -> List["FakeNode"]:
        """This node and its descendants in document order."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes
    
    def matches(self, selector: str) -> bool:
        if selector.startswith("#"):
            return self.attrs.get("id") == selector[1:]
        if selector.startswith("."):
            return selector[1:] in self.attrs.get("class", "").split()
        m = _ATTRIBUTE_SELECTOR.match(selector)
        if m:
            name, contains, value = m.group(1), m.group(2), _unescape(m.group(3))
            if contains:
                return value in self.attrs.get(name, "").split()
            return self.attrs.get(name) == value
        return selector == self.tag


class FakeElement(IElement):
    """Live reference to a FakeNode."""
    
    def __init__(self, node: FakeNode, page: "FakePage"):
        self.node = node
        self.page = page
    
    async def click(self, **options: Any) -> None:
        self.node.clicks += 1
    
    async def type(self, text: str, delay: int = 0, **options: Any) -> None:
        self.node.value += text
    
    async def get_attribute(self, name: str) -> Optional[str]:
        return self.node.attrs.get(name)
    
    async def text_content(self) -> Optional[str]:
        return self.node.text
    
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.page.log.append(("element.evaluate", expression))
        style = self.node.style
        if expression == VISIBILITY_JS:
            return (
                style.get("display") != "none"
                and style.get("visibility") != "hidden"
                and style.get("opacity") != "0"
            )
        if expression == ELEMENT_DETAILS_JS:
            return {
                "tagName": self.node.tag,
                "attributes": dict(self.node.attrs),
                "textContent": self.node.text.strip()[:100],
                "isVisible": style.get("display") != "none" and style.get("visibility") != "hidden",
            }
        if expression == OUTER_HTML_JS:
            return f"<{self.node.tag}>{self.node.text}</{self.node.tag}>"
        if expression == PARENT_HTML_JS:
            return f"<body><{self.node.tag}>{self.node.text}</{self.node.tag}></body>"
        if expression == CLEAR_VALUE_JS:
            if self.node.tag in ("input", "textarea"):
                self.node.value = ""
            return None
        if "scrollIntoView" in expression:
            self.node.scrolled = True
            return None
        raise NotImplementedError(expression)
    
    async def bounding_box(self) -> Optional[Dict[str, float]]:
        return {"x": 10.0, "y": 20.0, "width": 100.0, "height": 30.0}
    
    async def scroll_into_view(self) -> None:
        self.node.scrolled = True


class FakePage(IPage):
    """
    In-memory page.
    
    Attributes:
        nodes: Top-level document nodes in document order
        errors: Selector -> exception raised when that selector is queried
        fail_marker_requery: Raise when re-querying a text-scan marker
        log: Every driver call, in order
    """
    
    def __init__(self, nodes: Optional[List[FakeNode]] = None):
        self.nodes = list(nodes or [])
        self.errors: Dict[str, Exception] = {}
        self.fail_marker_requery = False
        self.screenshot_error: Optional[Exception] = None
        self.closed = False
        self.queries = 0
        self.log: List[tuple] = []
    
    @property
    def url(self) -> str:
        return "https://example.com/"
    
    def is_closed(self) -> bool:
        return self.closed
    
    async def goto(self, url: str, **options: Any) -> None:
        self.log.append(("goto", url))
    
    def _all(self) -> List[FakeNode]:
        return [node for top in self.nodes for node in top.walk()]
    
    def _attached(self) -> List[FakeNode]:
        return [n for n in self._all() if self.queries > n.present_after]
    
    def _select(self, selector: str) -> List[FakeNode]:
        self.queries += 1
        self.log.append(("query", selector))
        if selector in self.errors:
            raise self.errors[selector]
        if self.fail_marker_requery and MARKER_ATTRIBUTE in selector:
            raise RuntimeError("Execution context was destroyed")
        if selector.startswith("xpath="):
            expression = selector[len("xpath="):]
            m = re.match(r'^//\*\[contains\(text\(\), "(.*)"\)\]$', expression)
            if not m:
                return []
            return [n for n in self._attached() if m.group(1) in n.text]
        parts = [part.strip() for part in selector.split(", ")]
        return [n for n in self._attached() if any(n.matches(part) for part in parts)]
    
    async def query_selector(self, selector: str) -> Optional[IElement]:
        found = self._select(selector)
        return FakeElement(found[0], self) if found else None
    
    async def query_selector_all(self, selector: str) -> List[IElement]:
        return [FakeElement(node, self) for node in self._select(selector)]
    
    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.log.append(("evaluate", expression))
        if expression == MARK_TEXT_MATCH_JS:
            self.queries += 1
            text, attr, token = arg
            def contains(node: FakeNode) -> bool:
                return node.tag.upper() not in SKIPPED_TAGS and text in node.rendered_text()
            
            for node in self._attached():
                if contains(node) and not any(contains(child) for child in node.children):
                    node.attrs[attr] = token
                    return True
            return False
        if expression == UNMARK_JS:
            attr, token = arg
            removed = 0
            for node in self._all():
                if node.attrs.get(attr) == token:
                    del node.attrs[attr]
                    removed += 1
            return removed
        if expression == SCROLL_POSITION_JS:
            return {"x": 0, "y": 120, "maxX": 0, "maxY": 900}
        raise NotImplementedError(expression)
    
    async def content(self) -> str:
        return "<html><body>" + "".join(
            f"<{n.tag}>{n.text}</{n.tag}>" for n in self.nodes
        ) + "</body></html>"
    
    async def screenshot(self, path: Any = None, full_page: bool = False, **options: Any) -> bytes:
        if self.screenshot_error:
            raise self.screenshot_error
        self.log.append(("screenshot",))
        return b"\x89PNG-fake"
    
    async def close(self) -> None:
        self.closed = True
    
    def has_marker(self) -> bool:
        return any(MARKER_ATTRIBUTE in n.attrs for n in self._all())
    
    def queried(self) -> List[str]:
        return [entry[1] for entry in self.log if entry[0] == "query"]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep tests independent of the developer's environment."""
    for key in list(os.environ):
        if key.startswith("ELEMENT_RESOLVER__"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def resolver_settings():
    """Resolver settings with the stock backoff schedule."""
    return ResolverSettings(
        max_retries=3,
        initial_delay_ms=100,
        max_delay_ms=2000,
        backoff_factor=1.5,
    )


@pytest.fixture
def sleeps():
    """List that collects every backoff sleep (seconds)."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    """Sleep replacement that records instead of waiting."""
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)
    return _sleep


@pytest.fixture
def resolver(resolver_settings, fake_sleep):
    """ElementResolver that never really sleeps."""
    from element_resolver.engine.resolver import ElementResolver
    return ElementResolver(resolver_settings, sleep=fake_sleep)


@pytest.fixture
def make_node():
    """Factory for FakeNode."""
    return FakeNode


@pytest.fixture
def make_page():
    """Factory for FakePage."""
    return FakePage
