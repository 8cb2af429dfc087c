"""
Profile Discovery

Periodically lists the provider's profiles, keeps the ones under the key
prefix, and starts a poller for every profile not already tracked.
"""

import asyncio
from collections.abc import Callable

from confsync.config.constants import DISCOVERY_SOURCE
from confsync.providers.base import ConfigurationProvider, Profile
from confsync.sync.cache import ConfigurationCache
from confsync.sync.events import ErrorEvent, EventBus
from confsync.sync.poller import ProfilePoller
from confsync.utils.exceptions import ConfSyncError, ProviderError
from confsync.utils.logging import get_logger

logger = get_logger(__name__)

PollerFactory = Callable[[Profile, Callable[[ProfilePoller], None]], ProfilePoller]


class ProfileDiscovery:
    """Discovers profiles and owns the registry of active pollers."""

    def __init__(
        self,
        provider: ConfigurationProvider,
        application_id: str,
        cache: ConfigurationCache,
        events: EventBus,
        poller_factory: PollerFactory,
        is_closed: Callable[[], bool],
    ):
        self.provider = provider
        self.application_id = application_id
        self.cache = cache
        self.events = events
        self.poller_factory = poller_factory
        self._is_closed = is_closed

        # Pollers in STARTING or POLLING state, by profile name
        self.pollers: dict[str, ProfilePoller] = {}
        self.cycle_count = 0

    async def list_profiles(self) -> list[Profile]:
        """List every profile of the application, following pagination."""
        profiles: list[Profile] = []
        next_token: str | None = None

        while True:
            page = await self.provider.list_profiles_page(self.application_id, next_token)
            profiles.extend(page.items)
            next_token = page.next_token
            if not next_token:
                break

        return profiles

    async def discover(self) -> list[Profile]:
        """
        Run one discovery cycle.

        Returns:
            Profiles observed this cycle after prefix filtering, or an
            empty list when listing failed
        """
        self.cycle_count += 1
        try:
            profiles = await self.list_profiles()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = e if isinstance(e, ConfSyncError) else ProviderError(
                str(e) or e.__class__.__name__, operation="list_profiles"
            )
            logger.warning(f"Profile discovery failed: {error}")
            await self.events.emit(ErrorEvent(DISCOVERY_SOURCE, error))
            return []

        if self._is_closed():
            return []

        observed = [p for p in profiles if self.cache.matches(p.name)]
        for profile in observed:
            if profile.name not in self.pollers:
                self._launch(profile)

        logger.debug(
            f"Discovery cycle {self.cycle_count}: {len(observed)} profiles, "
            f"{len(self.pollers)} tracked"
        )
        return observed

    def _launch(self, profile: Profile) -> None:
        """Track a new profile and spawn its poller."""
        poller = self.poller_factory(profile, self._untrack)
        self.pollers[profile.name] = poller
        poller.spawn()
        logger.info(f"Started poller for profile {profile.name}")

    def _untrack(self, poller: ProfilePoller) -> None:
        """Forget a stopped poller so the profile is eligible again."""
        if self.pollers.get(poller.name) is poller:
            del self.pollers[poller.name]

    async def run(self, interval: float) -> None:
        """Rediscover profiles every interval seconds until closed."""
        while not self._is_closed():
            await asyncio.sleep(interval)
            if self._is_closed():
                break
            await self.discover()

    async def stop(self) -> None:
        """Cancel every tracked poller."""
        pollers = list(self.pollers.values())
        await asyncio.gather(*(poller.cancel() for poller in pollers))
        self.pollers.clear()
