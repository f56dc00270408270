"""
Engine module - multi-strategy element resolution.
"""

from element_resolver.engine.strategies import (
    Strategy,
    LocatorKind,
    StrategySpec,
    StrategyRegistry,
    translate,
)
from element_resolver.engine.locator import CandidateLocator, MARKER_ATTRIBUTE, text_marker
from element_resolver.engine.visibility import is_visible
from element_resolver.engine.diagnostics import (
    AttemptOutcome,
    StrategyAttempt,
    DiagnosticTrace,
    DiagnosticRecorder,
)
from element_resolver.engine.options import ResolutionOptions
from element_resolver.engine.backoff import Deadline, attempt_with_retry
from element_resolver.engine.resolver import (
    ElementResolver,
    Resolution,
    ResolverState,
)

__all__ = [
    "Strategy",
    "LocatorKind",
    "StrategySpec",
    "StrategyRegistry",
    "translate",
    "CandidateLocator",
    "MARKER_ATTRIBUTE",
    "text_marker",
    "is_visible",
    "AttemptOutcome",
    "StrategyAttempt",
    "DiagnosticTrace",
    "DiagnosticRecorder",
    "ResolutionOptions",
    "Deadline",
    "attempt_with_retry",
    "ElementResolver",
    "Resolution",
    "ResolverState",
]
