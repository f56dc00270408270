"""
Element Resolver - reliable multi-strategy DOM element lookup.

Given a target description that may be free text, an identifier, an
attribute value or a ready-made query, the resolver locates a single
element across page-load races, selector syntaxes and transient
non-visibility, and explains itself when it cannot.

Example:
    >>> from element_resolver import ElementResolver
    >>> resolver = ElementResolver()
    >>> element = await resolver.resolve(page, "Submit", strategies=["id", "text"])
"""

__version__ = "0.1.0"

# Public API exports
from element_resolver.config.settings import Settings
from element_resolver.engine.options import ResolutionOptions
from element_resolver.engine.resolver import ElementResolver, Resolution
from element_resolver.engine.strategies import Strategy, StrategyRegistry, translate
from element_resolver.actions.toolbox import ElementTools
from element_resolver.exceptions import NoPageAttachedError, ResolutionFailedError

__all__ = [
    "Settings",
    "ResolutionOptions",
    "ElementResolver",
    "Resolution",
    "Strategy",
    "StrategyRegistry",
    "translate",
    "ElementTools",
    "NoPageAttachedError",
    "ResolutionFailedError",
    "__version__",
]
