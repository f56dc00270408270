"""
Resolution options - per-call knobs with process-wide defaults.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from element_resolver.config.settings import ResolverSettings
from element_resolver.utils.retry import RetryConfig


@dataclass(frozen=True)
class ResolutionOptions:
    """
    Options for one resolve call.
    
    ``timeout_ms`` is advisory unless ``enforce_timeout`` is set: by default
    only ``max_retries`` bounds the work done per strategy.
    """
    timeout_ms: int = 30000
    require_visible: bool = True
    max_retries: int = 3
    initial_delay_ms: float = 100
    max_delay_ms: float = 2000
    backoff_factor: float = 1.5
    enforce_timeout: bool = False
    
    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must not be negative")
        if self.backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
    
    @classmethod
    def from_settings(cls, settings: ResolverSettings) -> "ResolutionOptions":
        return cls(
            timeout_ms=settings.timeout_ms,
            require_visible=settings.require_visible,
            max_retries=settings.max_retries,
            initial_delay_ms=settings.initial_delay_ms,
            max_delay_ms=settings.max_delay_ms,
            backoff_factor=settings.backoff_factor,
            enforce_timeout=settings.enforce_timeout,
        )
    
    def with_overrides(self, visible: Optional[bool] = None, **overrides: Any) -> "ResolutionOptions":
        """
        Copy with the non-None overrides applied.
        
        ``visible`` is accepted as the tool-facing name of ``require_visible``.
        """
        if visible is not None:
            overrides["require_visible"] = visible
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self
    
    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.max_retries,
            initial_delay_ms=self.initial_delay_ms,
            max_delay_ms=self.max_delay_ms,
            backoff_multiplier=self.backoff_factor,
        )
