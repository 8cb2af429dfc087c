"""
Profile Poller

Per-profile recurring pull loop. A poller starts a session, then pulls,
compares, parses and caches configuration on a fixed interval until the
profile is deleted at the provider or the engine closes.

State machine: STARTING -> POLLING -> STOPPED. STOPPED is terminal for a
poller instance; a rediscovered profile gets a fresh poller.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from confsync.config.constants import DEFAULT_CONTENT_TYPE
from confsync.providers.base import ConfigurationProvider, LatestConfiguration, Profile
from confsync.sync.cache import CacheEntry, ConfigurationCache
from confsync.sync.change_detector import ChangeDetector, content_digest
from confsync.sync.codec import parse_content
from confsync.sync.events import DebugEvent, ErrorEvent, EventBus, ProfileDeletedEvent, UpdateEvent
from confsync.sync.sessions import SessionTracker
from confsync.utils.exceptions import (
    ConfSyncError,
    ParseError,
    ProfileGoneError,
    ProviderError,
    SessionError,
)
from confsync.utils.logging import get_logger

logger = get_logger(__name__)


class PollerState(Enum):
    """Poller lifecycle states."""
    STARTING = "starting"
    POLLING = "polling"
    STOPPED = "stopped"


class ProfilePoller:
    """Recurring configuration pull for a single profile."""

    def __init__(
        self,
        profile: Profile,
        provider: ConfigurationProvider,
        sessions: SessionTracker,
        detector: ChangeDetector,
        cache: ConfigurationCache,
        events: EventBus,
        poll_interval: float,
        is_closed: Callable[[], bool],
        on_stopped: Callable[["ProfilePoller"], None] | None = None,
        purge_on_delete: bool = False,
    ):
        self.profile = profile
        self.provider = provider
        self.sessions = sessions
        self.detector = detector
        self.cache = cache
        self.events = events
        self.poll_interval = poll_interval
        self.purge_on_delete = purge_on_delete
        self._is_closed = is_closed
        self._on_stopped = on_stopped

        self.state = PollerState.STARTING
        self._task: asyncio.Task | None = None
        self._first_cycle = asyncio.Event()

        # Statistics
        self.poll_count = 0
        self.update_count = 0
        self.error_count = 0
        self.last_polled_at: datetime | None = None

    @property
    def name(self) -> str:
        return self.profile.name

    async def start(self) -> bool:
        """
        Obtain the initial session token.

        Returns:
            True if the poller moved to POLLING
        """
        try:
            await self.sessions.start_session(self.profile)
        except asyncio.CancelledError:
            raise
        except SessionError as e:
            logger.warning(f"Skipping profile {self.name}: {e}")
            await self.events.emit(DebugEvent(f"Skipping profile {self.name}: {e}"))
            self._stop()
            return False
        except Exception as e:
            logger.warning(f"Skipping profile {self.name}: {e}")
            await self.events.emit(ErrorEvent(self.name, self._as_provider_error(e, "start_session")))
            self._stop()
            return False

        if self._is_closed():
            self._stop()
            return False

        self.state = PollerState.POLLING
        return True

    async def poll_once(self) -> None:
        """Pull, compare and cache the latest configuration once."""
        if self.state is not PollerState.POLLING or self._is_closed():
            return

        now = datetime.now(timezone.utc)
        self.poll_count += 1
        self.last_polled_at = now
        await self.events.emit(
            DebugEvent(f"Polling config profile: {self.name} at {now.isoformat()}")
        )

        token = self.sessions.token(self.name)
        if token is None:
            await self.events.emit(
                ErrorEvent(
                    self.name,
                    ProviderError("No session token", operation="get_latest", profile_name=self.name),
                )
            )
            self._stop()
            return

        try:
            result = await self.provider.get_latest(token)
        except asyncio.CancelledError:
            raise
        except ProfileGoneError:
            if not self._is_closed():
                await self._handle_deleted()
            return
        except Exception as e:
            if not self._is_closed():
                self.error_count += 1
                logger.warning(f"Error polling profile {self.name}: {e}")
                await self.events.emit(ErrorEvent(self.name, self._as_provider_error(e, "get_latest")))
            return

        # Engine closed while the pull was in flight
        if self._is_closed():
            return

        self.sessions.advance(self.name, result.next_token)
        await self._apply(result)

    async def _apply(self, result: LatestConfiguration) -> None:
        """Run a pulled payload through change detection and parsing."""
        if not result.payload:
            return

        raw = result.payload.decode("utf-8", errors="replace")
        if not raw.strip():
            return

        digest = content_digest(result.payload)
        if not self.detector.has_changed(self.name, digest):
            return

        try:
            parsed = parse_content(raw, result.content_type)
        except ParseError as e:
            self.error_count += 1
            logger.warning(f"Unparseable payload for profile {self.name}: {e}")
            await self.events.emit(ErrorEvent(self.name, e))
            return

        entry = CacheEntry(
            parsed=parsed,
            content_type=result.content_type or DEFAULT_CONTENT_TYPE,
            version=result.version,
            updated_at=datetime.now(timezone.utc),
        )

        # Digest and entry are committed together
        self.detector.record(self.name, digest)
        self.cache.put(self.name, entry)
        self.update_count += 1

        logger.info(f"Configuration updated for profile {self.name}", version=entry.version)
        await self.events.emit(UpdateEvent(self.name, parsed, entry))

    async def _handle_deleted(self) -> None:
        """Terminate after the provider reported the profile gone."""
        logger.warning(f"Profile {self.name} no longer exists, stopping poller")
        await self.events.emit(ProfileDeletedEvent(self.name))
        if self.purge_on_delete:
            self.cache.remove(self.name)
        self._stop()

    def _stop(self) -> None:
        """Move to STOPPED and release per-profile state."""
        if self.state is PollerState.STOPPED:
            return
        self.state = PollerState.STOPPED
        self.sessions.release(self.name)
        self.detector.forget(self.name)
        self._first_cycle.set()
        task = self._task
        if task and task is not asyncio.current_task() and not task.done():
            task.cancel()
        if self._on_stopped:
            self._on_stopped(self)

    async def run(self) -> None:
        """Start the profile, then poll on a fixed interval until stopped."""
        try:
            if not await self.start():
                return

            while True:
                try:
                    await self.poll_once()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    self.error_count += 1
                    logger.error(f"Unexpected error polling profile {self.name}: {e}")
                    await self.events.emit(ErrorEvent(self.name, self._as_provider_error(e, "poll")))
                self._first_cycle.set()

                if self.state is PollerState.STOPPED or self._is_closed():
                    break

                await asyncio.sleep(self.poll_interval)
        finally:
            self._first_cycle.set()

    def spawn(self) -> asyncio.Task:
        """Create the background task running this poller."""
        if self._task is None:
            self._task = asyncio.create_task(self.run(), name=f"confsync-poll-{self.name}")
        return self._task

    async def cancel(self) -> None:
        """Cancel the background task and release per-profile state."""
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._stop()

    async def wait_first_cycle(self) -> None:
        """Wait until the start attempt and first poll have completed."""
        await self._first_cycle.wait()

    def stats(self) -> dict[str, Any]:
        """Get poller statistics."""
        return {
            "profile": self.name,
            "state": self.state.value,
            "polls": self.poll_count,
            "updates": self.update_count,
            "errors": self.error_count,
            "last_polled_at": self.last_polled_at.isoformat() if self.last_polled_at else None,
        }

    @staticmethod
    def _as_provider_error(error: Exception, operation: str) -> ConfSyncError:
        if isinstance(error, ConfSyncError):
            return error
        return ProviderError(str(error) or error.__class__.__name__, operation=operation)
