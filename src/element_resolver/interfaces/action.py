"""
Action Interface - Abstract base classes for element tools.

Every tool first resolves its target through the ElementResolver and then
acts on the element. Failures come back as ActionResult values carrying
the resolver's diagnostic trace, never as exceptions.

Example:
    >>> from element_resolver.actions import ClickAction
    >>> action = ClickAction()
    >>> result = await action.execute(page, ActionParams(target="Submit"))
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging
import time

from element_resolver.exceptions.resolution import ResolutionFailedError

if TYPE_CHECKING:
    from element_resolver.engine.resolver import ElementResolver, Resolution
    from element_resolver.interfaces.browser import IPage

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Element tools exposed to callers."""
    FIND = "find"
    CLICK = "click"
    TYPE = "type"
    WAIT_FOR_ELEMENT = "wait_for_element"
    SCROLL_INTO_VIEW = "scroll_into_view"


class ActionStatus(Enum):
    """Status of an action execution."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ActionResult:
    """
    Result of an action execution.
    
    Attributes:
        success: Whether the action succeeded
        action_type: The type of action that was executed
        status: Detailed status of the action
        data: Data returned by the action (element details)
        error: Error message if the action failed
        error_type: Exception class name for failures
        duration_ms: Time taken to execute the action in milliseconds
        screenshot: Failure snapshot, when one was captured
        metadata: Winning strategy on success, diagnostic trace on failure
    """
    success: bool
    action_type: ActionType
    status: ActionStatus = ActionStatus.SUCCESS
    data: Optional[Any] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: float = 0.0
    screenshot: Optional[bytes] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success_result(
        cls,
        action_type: ActionType,
        data: Optional[Any] = None,
        duration_ms: float = 0.0,
        **metadata: Any,
    ) -> "ActionResult":
        """Create a successful action result."""
        return cls(
            success=True,
            action_type=action_type,
            status=ActionStatus.SUCCESS,
            data=data,
            duration_ms=duration_ms,
            metadata=metadata,
        )

    @classmethod
    def failure_result(
        cls,
        action_type: ActionType,
        error: str,
        error_type: str = "ActionError",
        duration_ms: float = 0.0,
        screenshot: Optional[bytes] = None,
        **metadata: Any,
    ) -> "ActionResult":
        """Create a failed action result."""
        return cls(
            success=False,
            action_type=action_type,
            status=ActionStatus.FAILED,
            error=error,
            error_type=error_type,
            duration_ms=duration_ms,
            screenshot=screenshot,
            metadata=metadata,
        )


@dataclass
class ActionParams:
    """
    Parameters for an action.
    
    Attributes:
        target: Target description handed to the resolver
        value: Value for the action (e.g., text to type)
        strategies: Strategy order (resolver defaults when None)
        options: Resolution overrides and tool-specific flags
    """
    target: Optional[str] = None
    value: Optional[str] = None
    strategies: Optional[List[str]] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get an option value."""
        return self.options.get(key, default)


# Keys in ActionParams.options that are passed to the resolver
RESOLUTION_OPTION_KEYS = (
    "timeout_ms",
    "visible",
    "max_retries",
    "initial_delay_ms",
    "max_delay_ms",
    "backoff_factor",
    "enforce_timeout",
)


class IAction(ABC):
    """Abstract interface for element tools."""

    @property
    @abstractmethod
    def action_type(self) -> ActionType:
        """The ActionType of this action."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of this action."""
        ...

    @abstractmethod
    def validate_params(self, params: ActionParams) -> tuple[bool, Optional[str]]:
        """
        Validate the parameters for this action.
        
        Returns:
            Tuple of (is_valid, error_message)
        """
        ...

    @abstractmethod
    async def execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        """Resolve the target on ``page`` and act on it."""
        ...


class BaseAction(IAction):
    """
    Base implementation of IAction with common functionality.
    
    Subclasses override action_type, description, and _execute.
    """

    def __init__(self, resolver: Optional["ElementResolver"] = None):
        if resolver is None:
            from element_resolver.engine.resolver import ElementResolver
            resolver = ElementResolver()
        self.resolver = resolver

    def validate_params(self, params: ActionParams) -> tuple[bool, Optional[str]]:
        """Default validation checks for a target."""
        if not params.target:
            return False, f"{self.action_type.value} requires a target"
        return True, None

    async def resolve(self, page: Optional["IPage"], params: ActionParams) -> "Resolution":
        """Resolve ``params.target`` with the per-call overrides from ``params.options``."""
        overrides = {
            key: params.options[key]
            for key in RESOLUTION_OPTION_KEYS
            if key in params.options
        }
        return await self.resolver.resolve_detailed(
            page,
            params.target or "",
            strategies=params.strategies,
            **overrides,
        )

    async def execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        """
        Execute the action with timing and error handling.
        
        Subclasses should override _execute instead of this method.
        """
        is_valid, error_msg = self.validate_params(params)
        if not is_valid:
            return ActionResult.failure_result(
                action_type=self.action_type,
                error=error_msg or "Invalid parameters",
                error_type="ValidationError",
            )

        start_time = time.perf_counter()
        try:
            result = await self._execute(page, params)
            result.duration_ms = (time.perf_counter() - start_time) * 1000
            return result
        except ResolutionFailedError as e:
            return ActionResult.failure_result(
                action_type=self.action_type,
                error=f"Failed to {self.description.lower()} for target: {params.target}. Error: {e.message}",
                error_type=type(e).__name__,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                screenshot=e.snapshot,
                trace=e.trace.to_dict(),
            )
        except Exception as e:
            logger.error(f"{self.action_type.value} failed for {params.target!r}: {e}")
            return ActionResult.failure_result(
                action_type=self.action_type,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

    @abstractmethod
    async def _execute(self, page: Optional["IPage"], params: ActionParams) -> ActionResult:
        """
        Execute the action implementation.
        
        Subclasses must implement this method.
        """
        ...
