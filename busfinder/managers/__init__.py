"""
Business logic managers for the Bus Finder application.

This module contains configuration management, the host command bridge and
stop list helpers.
"""

from .config_manager import ConfigManager, ConfigData, ConfigurationError, ODPTConfig
# Note: BusCommandBridge not imported here to avoid circular import with api

__all__ = [
    "ConfigManager",
    "ConfigData",
    "ConfigurationError",
    "ODPTConfig",
]
