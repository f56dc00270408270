"""
Element Tools - the tool surface over one attached page.

Mirrors how the automation service issues one operation at a time against
its current page: attach a page, then call find/click/type/wait/scroll.
"""

from typing import Any, Dict, List, Optional, Type, TYPE_CHECKING

from element_resolver.actions.inspection import FindElementAction, WaitForElementAction
from element_resolver.actions.interaction import (
    ClickAction,
    ScrollIntoViewAction,
    TypeAction,
)
from element_resolver.interfaces.action import ActionParams, ActionResult, ActionType, BaseAction

if TYPE_CHECKING:
    from element_resolver.engine.resolver import ElementResolver
    from element_resolver.interfaces.browser import IPage


class ElementTools:
    """
    Element tools bound to the current page.
    
    Example:
        >>> tools = ElementTools(resolver)
        >>> tools.attach(page)
        >>> result = await tools.click("Submit", strategies=["id", "text"])
        >>> result.success
        True
    """
    
    ACTIONS: Dict[ActionType, Type[BaseAction]] = {
        ActionType.FIND: FindElementAction,
        ActionType.CLICK: ClickAction,
        ActionType.TYPE: TypeAction,
        ActionType.WAIT_FOR_ELEMENT: WaitForElementAction,
        ActionType.SCROLL_INTO_VIEW: ScrollIntoViewAction,
    }
    
    def __init__(
        self,
        resolver: Optional["ElementResolver"] = None,
        page: Optional["IPage"] = None,
    ):
        if resolver is None:
            from element_resolver.engine.resolver import ElementResolver
            resolver = ElementResolver()
        self.resolver = resolver
        self._page = page
        self._actions = {kind: cls(resolver) for kind, cls in self.ACTIONS.items()}
    
    @property
    def page(self) -> Optional["IPage"]:
        return self._page
    
    def attach(self, page: "IPage") -> None:
        self._page = page
    
    def detach(self) -> None:
        self._page = None
    
    async def run(
        self,
        action_type: ActionType,
        target: str,
        value: Optional[str] = None,
        strategies: Optional[List[str]] = None,
        **options: Any,
    ) -> ActionResult:
        """Run one tool against the attached page."""
        params = ActionParams(
            target=target,
            value=value,
            strategies=strategies,
            options={key: val for key, val in options.items() if val is not None},
        )
        return await self._actions[action_type].execute(self._page, params)
    
    async def find(
        self,
        target: str,
        strategies: Optional[List[str]] = None,
        include_html: bool = False,
        include_context: bool = False,
        **options: Any,
    ) -> ActionResult:
        return await self.run(
            ActionType.FIND,
            target,
            strategies=strategies,
            include_html=include_html,
            include_context=include_context,
            **options,
        )
    
    async def click(self, target: str, strategies: Optional[List[str]] = None, **options: Any) -> ActionResult:
        return await self.run(ActionType.CLICK, target, strategies=strategies, **options)
    
    async def type_text(
        self,
        target: str,
        text: str,
        strategies: Optional[List[str]] = None,
        **options: Any,
    ) -> ActionResult:
        return await self.run(ActionType.TYPE, target, value=text, strategies=strategies, **options)
    
    async def wait_for(
        self,
        target: str,
        timeout_ms: Optional[int] = None,
        visible: Optional[bool] = None,
        strategies: Optional[List[str]] = None,
        **options: Any,
    ) -> ActionResult:
        return await self.run(
            ActionType.WAIT_FOR_ELEMENT,
            target,
            strategies=strategies,
            timeout_ms=timeout_ms,
            visible=visible,
            **options,
        )
    
    async def scroll_into_view(
        self,
        target: str,
        strategies: Optional[List[str]] = None,
        **options: Any,
    ) -> ActionResult:
        return await self.run(ActionType.SCROLL_INTO_VIEW, target, strategies=strategies, **options)
