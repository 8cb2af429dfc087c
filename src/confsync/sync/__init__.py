"""
confsync Synchronization Core

Discovery, per-profile polling, change detection and the in-memory cache
behind ConfigurationSyncEngine.
"""

from confsync.sync.cache import CacheEntry, ConfigurationCache
from confsync.sync.change_detector import ChangeDetector, content_digest
from confsync.sync.codec import parse_content
from confsync.sync.discovery import ProfileDiscovery
from confsync.sync.engine import ConfigurationSyncEngine
from confsync.sync.events import (
    DebugEvent,
    ErrorEvent,
    EventBus,
    EventType,
    ProfileDeletedEvent,
    ReadyEvent,
    UpdateEvent,
)
from confsync.sync.poller import PollerState, ProfilePoller
from confsync.sync.sessions import SessionTracker

__all__ = [
    "ConfigurationSyncEngine",
    "ConfigurationCache",
    "CacheEntry",
    "ChangeDetector",
    "content_digest",
    "parse_content",
    "ProfileDiscovery",
    "ProfilePoller",
    "PollerState",
    "SessionTracker",
    "EventBus",
    "EventType",
    "ReadyEvent",
    "UpdateEvent",
    "ErrorEvent",
    "ProfileDeletedEvent",
    "DebugEvent",
]
