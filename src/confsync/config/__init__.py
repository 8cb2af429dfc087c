"""
confsync Configuration Management Module

Provides hierarchical configuration management with support for:
- Default values embedded in code
- Environment-specific YAML files
- Environment variable overrides
"""

from confsync.config.constants import DEFAULT_CONFIG
from confsync.config.environments import detect_environment
from confsync.config.settings import ConfigManager, Settings, get_config

__all__ = [
    "ConfigManager",
    "Settings",
    "get_config",
    "DEFAULT_CONFIG",
    "detect_environment",
]
