"""
confsync Utility Modules

Common utilities for logging, exceptions and decorators.
"""

from confsync.utils.decorators import measure_latency
from confsync.utils.exceptions import (
    ConfigurationError,
    ConfSyncError,
    ParseError,
    ProfileGoneError,
    ProviderError,
    SessionError,
)
from confsync.utils.logging import SyncEventLogger, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "SyncEventLogger",
    "ConfSyncError",
    "ConfigurationError",
    "ParseError",
    "SessionError",
    "ProviderError",
    "ProfileGoneError",
    "measure_latency",
]
