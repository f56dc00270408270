"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from element_resolver.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.resolver.max_retries)
    3
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


StrategyName = Literal["css", "xpath", "text", "aria", "id", "name", "class"]

DEFAULT_STRATEGY_ORDER: List[str] = ["css", "xpath", "text", "aria", "id", "name", "class"]


class ResolverSettings(BaseModel):
    """
    Element resolution settings.
    
    These are the process-wide defaults for every resolve call; callers
    override them per call through ResolutionOptions.
    
    Attributes:
        max_retries: Attempts per strategy
        initial_delay_ms: Delay before the second attempt of a strategy
        max_delay_ms: Upper bound for any single backoff delay
        backoff_factor: Multiplier applied to the delay after each attempt
        timeout_ms: Declared time budget for one resolve call
        enforce_timeout: Treat timeout_ms as a hard deadline across retries
        require_visible: Reject nodes hidden by computed style
        default_strategies: Strategy order used when the caller gives none
        capture_snapshot: Capture a screenshot when resolution fails
        snapshot_dir: Persist failure screenshots here (None keeps them in memory)
        html_preview_chars: Characters of page HTML logged on failure
    """
    max_retries: int = Field(default=3, ge=1, le=20)
    initial_delay_ms: int = Field(default=100, ge=0, le=60000)
    max_delay_ms: int = Field(default=2000, ge=0, le=300000)
    backoff_factor: float = Field(default=1.5, ge=1.0, le=10.0)
    timeout_ms: int = Field(default=30000, ge=100, le=600000)
    enforce_timeout: bool = False
    require_visible: bool = True
    default_strategies: List[StrategyName] = Field(
        default_factory=lambda: list(DEFAULT_STRATEGY_ORDER)
    )
    capture_snapshot: bool = True
    snapshot_dir: Optional[str] = None
    html_preview_chars: int = Field(default=500, ge=0, le=100000)
    
    @model_validator(mode="after")
    def _check_delays(self) -> "ResolverSettings":
        if self.initial_delay_ms > self.max_delay_ms:
            raise ValueError("initial_delay_ms must not exceed max_delay_ms")
        if not self.default_strategies:
            raise ValueError("default_strategies must not be empty")
        return self


class BrowserSettings(BaseModel):
    """
    Browser automation settings.
    
    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser family
        timeout_ms: Default timeout for navigation
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
    """
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=800, ge=240, le=2160)


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with ELEMENT_RESOLVER__)
    3. Config file (YAML)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(resolver=ResolverSettings(max_retries=5))  # Override
    """
    
    model_config = SettingsConfigDict(
        env_prefix="ELEMENT_RESOLVER__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        
        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base
        
        merged = deep_merge(current, overrides)
        return Settings(**merged)
