"""
Interaction Actions - locate an element and interact with it.
"""

from typing import Optional, TYPE_CHECKING
import logging

from element_resolver.actions.inspection import describe_element, resolution_metadata
from element_resolver.interfaces.action import (
    BaseAction,
    ActionType,
    ActionResult,
    ActionParams,
)

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IPage

logger = logging.getLogger(__name__)


CLEAR_VALUE_JS = r'''
el => {
    if (el.tagName === 'INPUT' || el.tagName === 'TEXTAREA') {
        el.value = '';
    }
}
'''

SCROLL_POSITION_JS = r'''
() => ({
    x: window.scrollX,
    y: window.scrollY,
    maxX: document.documentElement.scrollWidth - window.innerWidth,
    maxY: document.documentElement.scrollHeight - window.innerHeight,
})
'''


class ClickAction(BaseAction):
    """Click on an element."""
    
    @property
    def action_type(self) -> ActionType:
        return ActionType.CLICK
    
    @property
    def description(self) -> str:
        return "Click element"
    
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        resolution = await self.resolve(page, params)
        details = await describe_element(resolution.element)
        await resolution.element.click()
        logger.info(f"Click complete on <{details.tag_name}> for {params.target!r}")
        return ActionResult.success_result(
            action_type=self.action_type,
            data=details.to_dict(),
            **resolution_metadata(resolution),
        )


class TypeAction(BaseAction):
    """Clear an input field and type text into it."""
    
    @property
    def action_type(self) -> ActionType:
        return ActionType.TYPE
    
    @property
    def description(self) -> str:
        return "Type into element"
    
    def validate_params(self, params: ActionParams) -> tuple[bool, Optional[str]]:
        if not params.target:
            return False, "Type action requires a target"
        if params.value is None:
            return False, "Type action requires a value"
        return True, None
    
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        resolution = await self.resolve(page, params)
        element = resolution.element
        details = await describe_element(element)
        
        await element.evaluate(CLEAR_VALUE_JS)
        await element.click()
        await element.type(params.value or "", delay=int(params.get("delay", 0)))
        logger.info(f"Typing complete into <{details.tag_name}> for {params.target!r}")
        
        return ActionResult.success_result(
            action_type=self.action_type,
            data=details.to_dict(),
            text=params.value,
            **resolution_metadata(resolution),
        )


class ScrollIntoViewAction(BaseAction):
    """Scroll an element to the center of the viewport."""
    
    @property
    def action_type(self) -> ActionType:
        return ActionType.SCROLL_INTO_VIEW
    
    @property
    def description(self) -> str:
        return "Scroll to element"
    
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        resolution = await self.resolve(page, params)
        await resolution.element.scroll_into_view()
        details = await describe_element(resolution.element)
        # resolve() already rejected a missing page
        scroll_position = await page.evaluate(SCROLL_POSITION_JS)  # type: ignore[union-attr]
        return ActionResult.success_result(
            action_type=self.action_type,
            data={**details.to_dict(), "scroll_position": scroll_position},
            **resolution_metadata(resolution),
        )
