"""
confsync Environment Detection and Management

Handles automatic environment detection and environment-specific behaviors.
"""

import os
from typing import Any


def detect_environment() -> str:
    """Auto-detect environment based on various signals."""

    # Explicit environment variable
    if env := os.getenv("ENVIRONMENT"):
        return env.lower()

    # Kubernetes detection
    if os.getenv("KUBERNETES_SERVICE_HOST"):
        namespace = os.getenv("NAMESPACE", "")
        if "prod" in namespace:
            return "production"
        return "staging"

    # Container without explicit environment
    if os.path.exists("/.dockerenv"):
        return "staging"

    # Safe default
    return "development"


def get_environment_config(environment: str) -> dict[str, Any]:
    """Get environment-specific configuration overrides."""

    configs = {
        "development": {
            "app": {
                "debug": True,
                "log_level": "DEBUG",
            },
            "sync": {
                "poll_interval_seconds": 15.0,
                "discovery_interval_seconds": 60.0,
            },
        },

        "staging": {
            "app": {
                "debug": False,
                "log_level": "INFO",
                "log_json": True,
            },
        },

        "production": {
            "app": {
                "debug": False,
                "log_level": "INFO",
                "log_json": True,
            },
            "api": {
                "host": "0.0.0.0",
            },
        },
    }

    return configs.get(environment, configs["development"])
