"""
Config Loader - Load and merge configuration from multiple sources.

This module provides utilities for loading configuration from YAML files,
environment variables, and explicit overrides, with proper precedence.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from element_resolver.config.settings import Settings
from element_resolver.exceptions.base import ConfigurationError


class ConfigLoader:
    """
    Configuration loader that merges settings from multiple sources.
    
    Priority order (highest to lowest):
    1. Explicit overrides passed to load()
    2. Environment variables
    3. Config file
    4. Default values
    """
    
    DEFAULT_CONFIG_PATHS = [
        Path("element-resolver.yaml"),
        Path("config.yaml"),
        Path("config/default.yaml"),
        Path.home() / ".config" / "element-resolver" / "config.yaml",
    ]
    
    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.
        
        Args:
            config_path: Optional explicit path to config file
        """
        self.config_path = Path(config_path) if config_path else None
        self._file_config: Dict[str, Any] = {}
    
    def find_config_file(self) -> Optional[Path]:
        """
        Find the configuration file to load.
        
        Returns:
            Path to config file, or None if not found
        """
        if self.config_path:
            if not self.config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {self.config_path}",
                    {"path": str(self.config_path)},
                )
            return self.config_path
        
        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path
        
        return None
    
    def load_yaml_config(self, path: Path) -> Dict[str, Any]:
        """
        Load configuration from a YAML file.
        
        Args:
            path: Path to the YAML file
            
        Returns:
            Configuration dictionary
        """
        with open(path, "r") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}", {"path": str(path)})
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping", {"path": str(path)})
        return config
    
    def load(
        self,
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings from all sources.
        
        Args:
            env_file: Optional path to .env file
            overrides: Optional dictionary of values to override
            
        Returns:
            Complete Settings instance
        """
        if env_file:
            load_dotenv(env_file)
        else:
            for env_path in [Path(".env"), Path(".env.local")]:
                if env_path.exists():
                    load_dotenv(env_path)
                    break
        
        config_file = self.find_config_file()
        if config_file:
            self._file_config = self.load_yaml_config(config_file)
        
        try:
            # Pydantic fills in anything the file leaves out from env vars
            settings = Settings(**self._file_config)
            if overrides:
                settings = settings.merge_with(overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")
        
        return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """
    Convenience function to load configuration.
    
    Args:
        config_path: Optional path to config file
        env_file: Optional path to .env file
        **overrides: Keyword arguments to override settings
        
    Returns:
        Complete Settings instance
        
    Example:
        >>> settings = load_config()
        >>> settings = load_config(config_path="my-config.yaml")
        >>> settings = load_config(resolver={"max_retries": 5})
    """
    loader = ConfigLoader(config_path)
    return loader.load(env_file=env_file, overrides=overrides if overrides else None)
