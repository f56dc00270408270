"""
Interfaces module - Abstract contracts for pluggable components.
"""

from element_resolver.interfaces.browser import (
    BrowserType,
    ElementDetails,
    IElement,
    IPage,
    IBrowser,
)
from element_resolver.interfaces.action import (
    ActionType,
    ActionStatus,
    ActionResult,
    ActionParams,
    IAction,
    BaseAction,
)

__all__ = [
    "BrowserType",
    "ElementDetails",
    "IElement",
    "IPage",
    "IBrowser",
    "ActionType",
    "ActionStatus",
    "ActionResult",
    "ActionParams",
    "IAction",
    "BaseAction",
]
