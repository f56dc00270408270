"""
Actions module - element tools built on the resolver.
"""

from element_resolver.actions.inspection import (
    FindElementAction,
    WaitForElementAction,
    describe_element,
)
from element_resolver.actions.interaction import (
    ClickAction,
    TypeAction,
    ScrollIntoViewAction,
)
from element_resolver.actions.toolbox import ElementTools

__all__ = [
    "FindElementAction",
    "WaitForElementAction",
    "describe_element",
    "ClickAction",
    "TypeAction",
    "ScrollIntoViewAction",
    "ElementTools",
]
