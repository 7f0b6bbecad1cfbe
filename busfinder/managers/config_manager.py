"""
Configuration management for the Bus Finder application.

This module handles loading, saving, and validating application configuration
using Pydantic models for type safety and validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from version import (
    __app_name__,
    __odpt_api_url__,
    __odpt_endpoints__,
    __odpt_realtime_feed__,
    __version__,
    get_user_agent,
)

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ODPTConfig(BaseModel):
    """Configuration for ODPT public API access."""

    base_url: str = Field(default=__odpt_api_url__, description="ODPT API base URL")
    realtime_feed: str = Field(
        default=__odpt_realtime_feed__, description="GTFS realtime feed name"
    )
    timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        le=300,
        description="Total request timeout; None keeps the aiohttp default",
    )
    user_agent: str = Field(default_factory=get_user_agent)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Validate base URL scheme and strip trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("realtime_feed")
    @classmethod
    def validate_realtime_feed(cls, v):
        """Validate feed name is a single path segment."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("Realtime feed must be a non-empty name without '/'")
        return v

    def endpoint_url(self, resource: str) -> str:
        """
        Build the full URL for a named upstream resource.

        Args:
            resource: One of the keys of ``__odpt_endpoints__``

        Raises:
            KeyError: For unknown resource names
        """
        path = __odpt_endpoints__[resource].format(feed=self.realtime_feed)
        return f"{self.base_url}/{path}"


class LoggingConfig(BaseModel):
    """Configuration for application logging."""

    level: str = "WARNING"
    log_to_file: bool = True

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate and normalize the log level name."""
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return v


class ConfigData(BaseModel):
    """Main configuration data model."""

    odpt: ODPTConfig = Field(default_factory=ODPTConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class ConfigManager:
    """
    Manages application configuration with file persistence.

    Handles loading configuration from JSON files, creating default
    configurations, and saving changes back to disk.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses the
                per-user config directory
        """
        if config_path is None:
            self.config_path = self.get_default_config_path()
        else:
            self.config_path = Path(config_path)
        self.config: Optional[ConfigData] = None

        logger.debug(f"ConfigManager initialized with path: {self.config_path}")

    @staticmethod
    def get_default_config_path() -> Path:
        """
        Get the default configuration file path.

        On Windows, uses AppData/Roaming/BusFinder/config.json
        On Linux, uses XDG_CONFIG_HOME/BusFinder/config.json or
        ~/.config/BusFinder/config.json

        Returns:
            Path: Default configuration file path
        """
        if os.name == "nt":
            appdata = os.environ.get("APPDATA")
            if appdata:
                return Path(appdata) / __app_name__ / "config.json"
            return Path("config.json")

        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            config_dir = Path(xdg_config) / __app_name__
        else:
            config_dir = Path.home() / ".config" / __app_name__
        return config_dir / "config.json"

    def load_config(self) -> ConfigData:
        """
        Load configuration from file.

        If the configuration file doesn't exist, creates a default one.

        Returns:
            ConfigData: The loaded configuration

        Raises:
            ConfigurationError: If the configuration file is invalid
        """
        logger.debug(f"Loading config from: {self.config_path}")

        if not self.config_path.exists():
            logger.info(
                f"Config file doesn't exist, creating default at: {self.config_path}"
            )
            self.create_default_config()
            return self.config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.config = ConfigData(**data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}") from e
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Failed to load config: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read config: {e}") from e

        logger.debug(f"Successfully loaded config from: {self.config_path}")
        return self.config

    def save_config(self, config: ConfigData) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration data to save

        Returns:
            bool: True if saved successfully, False otherwise
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")
            return False

        self.config = config
        logger.info(f"Saved config to: {self.config_path}")
        return True

    def create_default_config(self) -> None:
        """Create a default configuration file (kept in memory if not writable)."""
        default_config = ConfigData()
        if not self.save_config(default_config):
            logger.warning("Using in-memory default configuration")
            self.config = default_config

    def get_config_summary(self) -> dict:
        """
        Get a summary of current configuration for display.

        Returns:
            dict: Configuration summary
        """
        if self.config is None:
            self.load_config()

        return {
            "app_version": __version__,
            "api_base_url": self.config.odpt.base_url,
            "realtime_feed": self.config.odpt.realtime_feed,
            "timeout": (
                f"{self.config.odpt.timeout_seconds} seconds"
                if self.config.odpt.timeout_seconds
                else "transport default"
            ),
            "log_level": self.config.logging.level,
        }
