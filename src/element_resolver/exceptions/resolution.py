"""
Resolution exceptions - failures of the multi-strategy element lookup.
"""

from typing import List, Optional, TYPE_CHECKING

from element_resolver.exceptions.base import ElementResolverError
from element_resolver.exceptions.browser import ElementNotFoundError

if TYPE_CHECKING:
    from element_resolver.engine.diagnostics import DiagnosticTrace, StrategyAttempt


class StrategyExhaustedError(ElementResolverError):
    """
    A single strategy used up all of its attempts.
    
    Internal to the resolver: raised by the retry controller and handled by
    the orchestrator, which moves on to the next strategy.
    """
    
    def __init__(self, strategy: str, query: str, attempts: List["StrategyAttempt"]):
        super().__init__(
            f"Strategy '{strategy}' exhausted after {len(attempts)} attempt(s)",
            {"strategy": strategy, "query": query},
        )
        self.strategy = strategy
        self.query = query
        self.attempts = attempts


class ResolutionFailedError(ElementNotFoundError):
    """
    Every strategy was exhausted without locating the target.
    
    Carries the full ordered diagnostic trace and, where one could be
    captured, a page snapshot.
    
    Attributes:
        target: The original target description
        trace: The diagnostic trace of the failed call
    """
    
    def __init__(self, target: str, trace: "DiagnosticTrace"):
        self.target = target
        self.trace = trace
        message = f"Failed to find element with selector: {target}. Debug info: {trace.summary()}"
        super().__init__(
            message,
            selector=target,
            details={"strategies": trace.strategies_tried},
        )
    
    @property
    def attempts(self) -> List["StrategyAttempt"]:
        return self.trace.attempts
    
    @property
    def snapshot(self) -> Optional[bytes]:
        return self.trace.snapshot
    
    def __str__(self) -> str:
        return self.message
