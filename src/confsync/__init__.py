"""
confsync - Live Configuration Synchronization

Keeps an in-memory, always-fresh copy of every configuration profile of an
application/environment pair and serves it to the host process.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "confsync Team"

from confsync.sync.engine import ConfigurationSyncEngine
from confsync.sync.events import EventType

__all__ = [
    "__version__",
    "__author__",
    "ConfigurationSyncEngine",
    "EventType",
]
