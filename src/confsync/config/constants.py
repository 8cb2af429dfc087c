"""
confsync Default Configuration Constants

Contains all default configuration values embedded in the application code.
These serve as the base layer in the hierarchical configuration system.
"""

from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "app": {
        "name": "confsync",
        "version": "1.0.0",
        "debug": False,
        "log_level": "INFO",
        "log_json": False,
        "environment": "development",
    },
    "api": {
        "host": "127.0.0.1",
        "port": 3000,
        "cors_origins": ["*"],
    },
    "appconfig": {
        "application_id": None,
        "environment_id": None,
        "region": None,
        "connect_timeout_seconds": 5,
        "read_timeout_seconds": 30,
        "max_attempts": 3,
    },
    "sync": {
        "poll_interval_seconds": 30.0,
        "discovery_interval_seconds": 120.0,
        "config_prefix": "",
        "purge_on_delete": False,
    },
}

# Content type stored on cache entries when the provider declares none
DEFAULT_CONTENT_TYPE = "text/plain"

# Notification source used for errors raised while listing profiles
DISCOVERY_SOURCE = "discovery"
