"""
Inspection Actions - locate an element and describe it.
"""

from typing import Optional, TYPE_CHECKING

from element_resolver.interfaces.action import (
    BaseAction,
    ActionType,
    ActionResult,
    ActionParams,
)
from element_resolver.interfaces.browser import ElementDetails

if TYPE_CHECKING:
    from element_resolver.engine.resolver import Resolution
    from element_resolver.interfaces.browser import IElement, IPage


ELEMENT_DETAILS_JS = r'''
el => {
    const attrs = {};
    for (const attr of el.attributes || []) {
        attrs[attr.name] = attr.value;
    }
    const style = window.getComputedStyle(el);
    return {
        tagName: el.tagName.toLowerCase(),
        attributes: attrs,
        textContent: (el.textContent || '').trim().substring(0, 100),
        isVisible: style.display !== 'none' && style.visibility !== 'hidden',
    };
}
'''

OUTER_HTML_JS = "el => el.outerHTML"

PARENT_HTML_JS = "el => el.parentElement ? el.parentElement.outerHTML : ''"


async def describe_element(
    element: "IElement",
    include_html: bool = False,
    include_context: bool = False,
) -> ElementDetails:
    """Collect a serializable description of a live element."""
    raw = await element.evaluate(ELEMENT_DETAILS_JS)
    details = ElementDetails(
        tag_name=raw.get("tagName", ""),
        attributes=raw.get("attributes") or {},
        text_content=raw.get("textContent", ""),
        bounding_box=await element.bounding_box(),
        is_visible=bool(raw.get("isVisible", True)),
    )
    if include_html:
        details.outer_html = await element.evaluate(OUTER_HTML_JS)
    if include_context:
        details.context_html = await element.evaluate(PARENT_HTML_JS)
    return details


def resolution_metadata(resolution: "Resolution") -> dict:
    return {
        "target": resolution.target,
        "strategy": resolution.strategy.value,
        "query": resolution.query,
        "attempt": resolution.attempt_index + 1,
    }


class FindElementAction(BaseAction):
    """Find an element and return detailed information about it."""
    
    @property
    def action_type(self) -> ActionType:
        return ActionType.FIND
    
    @property
    def description(self) -> str:
        return "Find element"
    
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        resolution = await self.resolve(page, params)
        details = await describe_element(
            resolution.element,
            include_html=bool(params.get("include_html", False)),
            include_context=bool(params.get("include_context", False)),
        )
        return ActionResult.success_result(
            action_type=self.action_type,
            data=details.to_dict(),
            **resolution_metadata(resolution),
        )


class WaitForElementAction(BaseAction):
    """
    Wait for an element to appear.
    
    The wait is the resolver's retry schedule; pass ``timeout_ms``,
    ``visible`` or ``max_retries`` in the options to tune it.
    """
    
    @property
    def action_type(self) -> ActionType:
        return ActionType.WAIT_FOR_ELEMENT
    
    @property
    def description(self) -> str:
        return "Wait for element"
    
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        resolution = await self.resolve(page, params)
        details = await describe_element(resolution.element)
        return ActionResult.success_result(
            action_type=self.action_type,
            data=details.to_dict(),
            **resolution_metadata(resolution),
        )
