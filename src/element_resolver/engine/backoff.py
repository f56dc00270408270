"""
Retry/Backoff Controller - repeated attempts for a single strategy.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, TYPE_CHECKING
import asyncio
import logging
import time

from element_resolver.engine.diagnostics import (
    AttemptOutcome,
    DiagnosticRecorder,
    StrategyAttempt,
)
from element_resolver.engine.strategies import Strategy
from element_resolver.exceptions.resolution import StrategyExhaustedError
from element_resolver.utils.retry import RetryConfig

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IElement

logger = logging.getLogger(__name__)


LocateFn = Callable[[], Awaitable[Optional["IElement"]]]
ValidateFn = Callable[["IElement"], Awaitable[bool]]
SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class Deadline:
    """Wall-clock budget for one resolve call."""
    expires_at: float
    clock: Callable[[], float] = time.monotonic
    
    @classmethod
    def after_ms(cls, timeout_ms: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(expires_at=clock() + timeout_ms / 1000, clock=clock)
    
    def remaining_ms(self) -> float:
        return max(0.0, (self.expires_at - self.clock()) * 1000)
    
    def expired(self) -> bool:
        return self.remaining_ms() <= 0


async def attempt_with_retry(
    strategy: Strategy,
    query: str,
    locate: LocateFn,
    validate: Optional[ValidateFn],
    policy: RetryConfig,
    recorder: DiagnosticRecorder,
    sleep: SleepFn = asyncio.sleep,
    deadline: Optional[Deadline] = None,
) -> "IElement":
    """
    Run up to ``policy.max_attempts`` locate/validate attempts for one strategy.
    
    Every failed attempt is recorded and followed by a backoff sleep unless
    it was the last one. Errors raised by ``locate`` or ``validate`` never
    escape; they become ``error`` attempts.
    
    Args:
        strategy: Strategy being tried
        query: Translated query, for the trace
        locate: Returns the candidate element or None
        validate: Visibility check, or None to accept any found element
        policy: Attempt count and delay schedule
        recorder: Call-scoped diagnostic recorder
        sleep: Coroutine used for backoff waits (seconds)
        deadline: Hard deadline; attempts stop once it passes
        
    Returns:
        The first element that was found and validated
        
    Raises:
        StrategyExhaustedError: If no attempt succeeded
    """
    attempts: List[StrategyAttempt] = []
    
    for attempt_index in range(policy.max_attempts):
        if deadline is not None and deadline.expired():
            logger.debug(f"Deadline reached before {strategy.value} attempt {attempt_index + 1}")
            recorder.timed_out = True
            break
        
        try:
            element = await locate()
            if element is None:
                outcome = AttemptOutcome.NOT_FOUND
                message = f"No element matched {query!r}"
            elif validate is not None and not await validate(element):
                outcome = AttemptOutcome.NOT_VISIBLE
                message = f"Element found with {strategy.value} but not visible"
            else:
                winner = StrategyAttempt(
                    strategy=strategy,
                    query=query,
                    attempt_index=attempt_index,
                    outcome=AttemptOutcome.SUCCESS,
                    message=f"Element found successfully with {strategy.value} on attempt {attempt_index + 1}",
                )
                recorder.record(winner)
                return element
        except Exception as e:
            outcome = AttemptOutcome.ERROR
            message = f"{type(e).__name__}: {e}"
        
        attempt = StrategyAttempt(
            strategy=strategy,
            query=query,
            attempt_index=attempt_index,
            outcome=outcome,
            message=message,
        )
        recorder.record(attempt)
        attempts.append(attempt)
        
        if policy.has_next(attempt_index):
            delay_ms = policy.delay_ms(attempt_index)
            if deadline is not None:
                delay_ms = min(delay_ms, deadline.remaining_ms())
            logger.debug(f"Waiting {delay_ms:.0f}ms before next attempt")
            await sleep(delay_ms / 1000)
    
    raise StrategyExhaustedError(strategy.value, query, attempts)
