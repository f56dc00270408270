"""
Diagnostic Recorder - Per-call trace of every resolution attempt.

One StrategyAttempt is recorded per retry iteration, in chronological
order. A successful call keeps only the winning attempt for logging; a
failed call is finalized into a DiagnosticTrace with a page snapshot.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import base64
import logging

from element_resolver.engine.strategies import Strategy

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IPage
    from element_resolver.reporting.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class AttemptOutcome(Enum):
    """Result of one locate/validate attempt."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NOT_VISIBLE = "not_visible"
    ERROR = "error"


@dataclass(frozen=True)
class StrategyAttempt:
    """
    One recorded attempt.
    
    Attributes:
        strategy: Strategy being tried
        query: Translated query that was executed
        attempt_index: 0-based attempt number within the strategy
        outcome: What happened
        message: Human-readable explanation
    """
    strategy: Strategy
    query: str
    attempt_index: int
    outcome: AttemptOutcome
    message: str
    
    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS
    
    def describe(self) -> str:
        return (
            f"{self.strategy.value} attempt {self.attempt_index + 1} "
            f"({self.outcome.value}): {self.message}"
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "query": self.query,
            "attempt_index": self.attempt_index,
            "outcome": self.outcome.value,
            "message": self.message,
        }


@dataclass
class DiagnosticTrace:
    """
    Everything needed to diagnose a failed resolve call without re-running it.
    
    Attributes:
        target: The original target description
        attempts: Every attempt, in chronological order
        snapshot: PNG screenshot taken after the last attempt
        snapshot_path: Where the snapshot was saved, if persisted
        html_preview: Leading characters of the page HTML
        timed_out: Whether an enforced deadline cut the call short
    """
    target: str
    attempts: List[StrategyAttempt] = field(default_factory=list)
    snapshot: Optional[bytes] = None
    snapshot_path: Optional[Path] = None
    html_preview: Optional[str] = None
    timed_out: bool = False
    
    @property
    def strategies_tried(self) -> List[str]:
        seen: List[str] = []
        for attempt in self.attempts:
            if attempt.strategy.value not in seen:
                seen.append(attempt.strategy.value)
        return seen
    
    def summary(self) -> str:
        lines = [attempt.describe() for attempt in self.attempts]
        if self.timed_out:
            lines.append("deadline reached before all strategies were tried")
        return " | ".join(lines)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "strategies_tried": self.strategies_tried,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
            "timed_out": self.timed_out,
            "snapshot_path": str(self.snapshot_path) if self.snapshot_path else None,
            "snapshot_base64": (
                base64.b64encode(self.snapshot).decode("ascii") if self.snapshot else None
            ),
            "html_preview": self.html_preview,
        }


class DiagnosticRecorder:
    """
    Accumulates attempts for a single resolve call.
    
    Example:
        >>> recorder = DiagnosticRecorder("Submit")
        >>> recorder.record(attempt)
        >>> trace = await recorder.finalize_failure(page)
    """
    
    def __init__(
        self,
        target: str,
        capture_snapshot: bool = True,
        html_preview_chars: int = 500,
        snapshot_store: Optional["SnapshotStore"] = None,
    ):
        self.target = target
        self.capture_snapshot = capture_snapshot
        self.html_preview_chars = html_preview_chars
        self.snapshot_store = snapshot_store
        self._attempts: List[StrategyAttempt] = []
        self.timed_out = False
    
    @property
    def attempts(self) -> List[StrategyAttempt]:
        return list(self._attempts)
    
    def record(self, attempt: StrategyAttempt) -> None:
        self._attempts.append(attempt)
        logger.debug(f"Resolving {self.target!r}: {attempt.describe()}")
    
    def attempts_for(self, strategy: Strategy) -> List[StrategyAttempt]:
        return [a for a in self._attempts if a.strategy is strategy]
    
    def finalize_success(self, winner: StrategyAttempt) -> StrategyAttempt:
        """Drop the granular trace and keep only the winning attempt."""
        logger.info(
            f"Element found for {self.target!r} with {winner.strategy.value} "
            f"on attempt {winner.attempt_index + 1} ({len(self._attempts)} attempt(s) total)"
        )
        self._attempts = [winner]
        return winner
    
    async def finalize_failure(self, page: "IPage") -> DiagnosticTrace:
        """Build the failure trace, attaching a snapshot of the page when possible."""
        trace = DiagnosticTrace(
            target=self.target,
            attempts=list(self._attempts),
            timed_out=self.timed_out,
        )
        logger.error(f"Failed to find element with selector: {self.target}. Debug info: {trace.summary()}")
        
        if not self.capture_snapshot:
            return trace
        
        try:
            trace.snapshot = await page.screenshot()
            html = await page.content()
        except Exception as e:
            # Best effort: the caller still gets the resolution failure
            logger.warning(f"Could not capture diagnostic snapshot: {e}")
            return trace
        
        if self.html_preview_chars:
            trace.html_preview = html[: self.html_preview_chars]
            logger.error(f"Page HTML context (first {self.html_preview_chars} chars): {trace.html_preview}...")
        
        if self.snapshot_store and trace.snapshot:
            trace.snapshot_path = self.snapshot_store.save(trace.snapshot, self.target)
        
        return trace
