"""
Configuration Synchronization Engine

Public surface of the sync core. Owns the session tracker, change
detector, cache and notification bus, runs profile discovery, and serves
reads from the in-memory cache.
"""

import asyncio
from typing import Any

from confsync.providers.base import ConfigurationProvider, Profile
from confsync.sync.cache import ConfigurationCache
from confsync.sync.change_detector import ChangeDetector
from confsync.sync.discovery import ProfileDiscovery
from confsync.sync.events import EventBus, EventHandler, EventType, ReadyEvent
from confsync.sync.poller import ProfilePoller
from confsync.sync.sessions import SessionTracker
from confsync.utils.exceptions import ConfigurationError
from confsync.utils.logging import get_logger

logger = get_logger(__name__)


class ConfigurationSyncEngine:
    """Keeps a live in-memory copy of every configuration profile."""

    def __init__(
        self,
        provider: ConfigurationProvider,
        application_id: str,
        environment_id: str,
        *,
        poll_interval: float = 30.0,
        discovery_interval: float = 120.0,
        prefix: str = "",
        purge_on_delete: bool = False,
    ):
        if provider is None:
            raise ConfigurationError("A configuration provider is required", config_key="provider")
        if not application_id:
            raise ConfigurationError("application_id is required", config_key="appconfig.application_id")
        if not environment_id:
            raise ConfigurationError("environment_id is required", config_key="appconfig.environment_id")
        for key, value in (
            ("sync.poll_interval_seconds", poll_interval),
            ("sync.discovery_interval_seconds", discovery_interval),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(f"Invalid {key} value: {value!r}", config_key=key)

        self.provider = provider
        self.application_id = application_id
        self.environment_id = environment_id
        self.poll_interval = float(poll_interval)
        self.discovery_interval = float(discovery_interval)
        self.purge_on_delete = purge_on_delete

        self.cache = ConfigurationCache(prefix)
        self.events = EventBus()
        self.sessions = SessionTracker(provider, application_id, environment_id)
        self.detector = ChangeDetector()
        self.discovery = ProfileDiscovery(
            provider,
            application_id,
            self.cache,
            self.events,
            self._create_poller,
            self._is_closed,
        )

        self._started = False
        self._closed = False
        self._start_lock = asyncio.Lock()
        self._discovery_task: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, provider: ConfigurationProvider, config) -> "ConfigurationSyncEngine":
        """Build an engine from a ConfigManager."""
        return cls(
            provider,
            config.get("appconfig.application_id"),
            config.get("appconfig.environment_id"),
            poll_interval=config.get("sync.poll_interval_seconds", 30.0),
            discovery_interval=config.get("sync.discovery_interval_seconds", 120.0),
            prefix=config.get("sync.config_prefix", "") or "",
            purge_on_delete=bool(config.get("sync.purge_on_delete", False)),
        )

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._started and not self._closed

    def _is_closed(self) -> bool:
        return self._closed

    def _create_poller(self, profile: Profile, on_stopped) -> ProfilePoller:
        return ProfilePoller(
            profile,
            self.provider,
            self.sessions,
            self.detector,
            self.cache,
            self.events,
            self.poll_interval,
            self._is_closed,
            on_stopped=on_stopped,
            purge_on_delete=self.purge_on_delete,
        )

    async def start(self) -> None:
        """
        Run initial discovery, wait for the first poll of every profile,
        announce readiness and begin periodic rediscovery.
        """
        async with self._start_lock:
            if self._started or self._closed:
                return

            logger.info(
                "Starting configuration sync",
                application_id=self.application_id,
                environment_id=self.environment_id,
                prefix=self.cache.prefix,
            )

            await self.discovery.discover()
            pollers = list(self.discovery.pollers.values())
            if pollers:
                await asyncio.gather(*(p.wait_first_cycle() for p in pollers))

            if self._closed:
                return

            self._started = True
            profile_names = self.cache.names()
            logger.info(f"Configuration sync ready with {len(profile_names)} profiles")
            await self.events.emit(ReadyEvent(profile_names))

            self._discovery_task = asyncio.create_task(
                self.discovery.run(self.discovery_interval),
                name="confsync-discovery",
            )

    async def close(self) -> None:
        """Stop all background work. Cached values stay readable."""
        if self._closed:
            return
        self._closed = True

        task, self._discovery_task = self._discovery_task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self.discovery.stop()
        self.sessions.clear()
        self.detector.clear()
        logger.info("Configuration sync closed")

    def set_prefix(self, prefix: str) -> None:
        """
        Change the key prefix.

        Raises:
            ConfigurationError: The engine is running or prefix is not a string
        """
        if self.running:
            raise ConfigurationError(
                "Cannot change prefix while the engine is running",
                config_key="sync.config_prefix",
            )
        self.cache.set_prefix(prefix)

    def get_all(self) -> dict[str, dict[str, Any]]:
        return self.cache.get_all()

    def get(self, name: str, default: Any = None) -> Any:
        return self.cache.get(name, default)

    def purge(self, name: str) -> bool:
        """Remove the cached entry of a fully qualified profile name."""
        removed = self.cache.remove(name)
        if removed:
            logger.info(f"Purged cached configuration for profile {name}")
        return removed

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self.events.subscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self.events.unsubscribe(event_type, handler)

    def stats(self) -> dict[str, Any]:
        """Get engine status."""
        return {
            "started": self._started,
            "closed": self._closed,
            "prefix": self.cache.prefix,
            "cached_profiles": len(self.cache),
            "discovery_cycles": self.discovery.cycle_count,
            "pollers": {
                name: poller.stats() for name, poller in self.discovery.pollers.items()
            },
        }
