"""
Element Resolver - locate exactly one DOM node for an imprecise target.

Strategies are tried strictly in the caller's order; each one is retried
with exponential backoff before the next is considered. The first node
that is found (and visible, when required) wins. If every strategy is
exhausted the caller gets a ResolutionFailedError carrying the full trace.

State machine:
    IDLE -> TRYING_STRATEGY(i) -> FOUND
                               -> TRYING_STRATEGY(i+1) -> ... -> EXHAUSTED

Example:
    >>> resolver = ElementResolver()
    >>> button = await resolver.resolve(page, "Submit", strategies=["id", "text"])
    >>> await button.click()
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Union, TYPE_CHECKING
import asyncio
import logging
import time

from element_resolver.config import get_settings
from element_resolver.config.settings import ResolverSettings
from element_resolver.engine.backoff import Deadline, SleepFn, attempt_with_retry
from element_resolver.engine.diagnostics import DiagnosticRecorder, StrategyAttempt
from element_resolver.engine.locator import CandidateLocator
from element_resolver.engine.options import ResolutionOptions
from element_resolver.engine.strategies import Strategy, StrategyRegistry
from element_resolver.engine.visibility import is_visible
from element_resolver.exceptions.browser import NoPageAttachedError
from element_resolver.exceptions.resolution import (
    ResolutionFailedError,
    StrategyExhaustedError,
)

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IElement, IPage
    from element_resolver.reporting.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ResolverState(Enum):
    """States of a single resolve call."""
    IDLE = "idle"
    TRYING_STRATEGY = "trying_strategy"
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass
class Resolution:
    """A successful resolve call."""
    element: "IElement"
    target: str
    strategy: Strategy
    query: str
    winner: StrategyAttempt
    
    @property
    def attempt_index(self) -> int:
        return self.winner.attempt_index


class ElementResolver:
    """
    Multi-strategy element resolver.
    
    The resolver holds no per-page state; callers serialize calls against
    one page. Defaults come from ``ResolverSettings`` and can be overridden
    per call.
    """
    
    def __init__(
        self,
        settings: Optional[ResolverSettings] = None,
        snapshot_store: Optional["SnapshotStore"] = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the resolver.
        
        Args:
            settings: Resolver defaults (global settings when omitted)
            snapshot_store: Where to persist failure snapshots
            sleep: Backoff sleep coroutine, in seconds
            clock: Monotonic clock for deadline enforcement
        """
        self.settings = settings or get_settings().resolver
        if snapshot_store is None and self.settings.snapshot_dir:
            from element_resolver.reporting.snapshot_store import SnapshotStore
            snapshot_store = SnapshotStore(self.settings.snapshot_dir)
        self.snapshot_store = snapshot_store
        self._sleep = sleep
        self._clock = clock
    
    def default_options(self) -> ResolutionOptions:
        return ResolutionOptions.from_settings(self.settings)
    
    async def resolve(
        self,
        page: Optional["IPage"],
        target: str,
        strategies: Optional[Iterable[Union[str, Strategy]]] = None,
        options: Optional[ResolutionOptions] = None,
        **overrides: Any,
    ) -> "IElement":
        """
        Locate a single element for ``target``.
        
        Args:
            page: Page to search (must be open)
            target: Target description (text, id, attribute value or query)
            strategies: Strategies in the order to try them
            options: Per-call options (defaults from settings)
            **overrides: Individual option overrides, e.g. ``visible=False``
            
        Returns:
            Live element reference, valid until the next navigation
            
        Raises:
            NoPageAttachedError: If no page is attached
            ResolutionFailedError: If every strategy was exhausted
        """
        resolution = await self.resolve_detailed(page, target, strategies, options, **overrides)
        return resolution.element
    
    async def resolve_detailed(
        self,
        page: Optional["IPage"],
        target: str,
        strategies: Optional[Iterable[Union[str, Strategy]]] = None,
        options: Optional[ResolutionOptions] = None,
        **overrides: Any,
    ) -> Resolution:
        """Like resolve(), but also report which strategy and attempt won."""
        if page is None or page.is_closed():
            raise NoPageAttachedError()
        
        opts = (options or self.default_options()).with_overrides(**overrides)
        order = StrategyRegistry.normalize(strategies, self.settings.default_strategies)
        run = _ResolutionRun(self, page, target, order, opts)
        return await run.execute()


class _ResolutionRun:
    """State for one resolve call; discarded when the call returns or raises."""
    
    def __init__(
        self,
        resolver: ElementResolver,
        page: "IPage",
        target: str,
        order: List[Strategy],
        options: ResolutionOptions,
    ):
        self.page = page
        self.target = target
        self.order = order
        self.options = options
        self.policy = options.retry_config()
        self.locator = CandidateLocator(page)
        self.recorder = DiagnosticRecorder(
            target,
            capture_snapshot=resolver.settings.capture_snapshot,
            html_preview_chars=resolver.settings.html_preview_chars,
            snapshot_store=resolver.snapshot_store,
        )
        self.deadline = (
            Deadline.after_ms(options.timeout_ms, resolver._clock)
            if options.enforce_timeout else None
        )
        self._sleep = resolver._sleep
        self.state = ResolverState.IDLE
        self.index = 0
        self.resolution: Optional[Resolution] = None
    
    def _transition(self, state: ResolverState) -> None:
        logger.debug(f"Resolving {self.target!r}: {self.state.value} -> {state.value}")
        self.state = state
    
    async def execute(self) -> Resolution:
        logger.debug(
            f"Resolving {self.target!r} with strategies {[s.value for s in self.order]}"
        )
        self._transition(ResolverState.TRYING_STRATEGY)
        
        while self.state is ResolverState.TRYING_STRATEGY:
            if await self._try_strategy(self.order[self.index]):
                self._transition(ResolverState.FOUND)
            elif self.index + 1 < len(self.order) and not self._deadline_passed():
                self.index += 1
                self._transition(ResolverState.TRYING_STRATEGY)
            else:
                self._transition(ResolverState.EXHAUSTED)
        
        if self.state is ResolverState.FOUND and self.resolution is not None:
            self.recorder.finalize_success(self.resolution.winner)
            return self.resolution
        
        trace = await self.recorder.finalize_failure(self.page)
        raise ResolutionFailedError(self.target, trace)
    
    def _deadline_passed(self) -> bool:
        if self.deadline is not None and self.deadline.expired():
            self.recorder.timed_out = True
            return True
        return False
    
    async def _try_strategy(self, strategy: Strategy) -> bool:
        spec = StrategyRegistry.get(strategy)
        query = spec.translate(self.target)
        logger.debug(f"Trying strategy: {strategy.value} with selector: {query}")
        
        try:
            element = await attempt_with_retry(
                strategy=strategy,
                query=query,
                locate=lambda: self.locator.locate(query, spec.kind),
                validate=is_visible if self.options.require_visible else None,
                policy=self.policy,
                recorder=self.recorder,
                sleep=self._sleep,
                deadline=self.deadline,
            )
        except StrategyExhaustedError as e:
            logger.warning(f"Resolving {self.target!r}: {e.message}")
            return False
        
        self.resolution = Resolution(
            element=element,
            target=self.target,
            strategy=strategy,
            query=query,
            winner=self.recorder.attempts[-1],
        )
        return True
