"""
Session Tracker

Holds the continuation token each profile presents on its next pull.
Tokens live until the provider hands out a replacement.
"""

from confsync.providers.base import ConfigurationProvider, Profile
from confsync.utils.exceptions import SessionError
from confsync.utils.logging import get_logger

logger = get_logger(__name__)


class SessionTracker:
    """Per-profile continuation tokens."""

    def __init__(
        self,
        provider: ConfigurationProvider,
        application_id: str,
        environment_id: str,
    ):
        self.provider = provider
        self.application_id = application_id
        self.environment_id = environment_id
        self._tokens: dict[str, str] = {}

    async def start_session(self, profile: Profile) -> str:
        """
        Start a pull session for a profile and store its initial token.

        Raises:
            SessionError: The provider returned no token (no active deployment)
        """
        token = await self.provider.start_session(
            self.application_id,
            self.environment_id,
            profile.id,
        )
        if not token:
            raise SessionError(
                f"No active deployment for profile {profile.name}",
                profile_name=profile.name,
            )

        self._tokens[profile.name] = token
        logger.debug(f"Session started for profile {profile.name}")
        return token

    def advance(self, profile_name: str, next_token: str | None) -> None:
        """Replace the stored token when the provider supplied a new one."""
        if next_token:
            self._tokens[profile_name] = next_token

    def token(self, profile_name: str) -> str | None:
        return self._tokens.get(profile_name)

    def release(self, profile_name: str) -> None:
        self._tokens.pop(profile_name, None)

    def clear(self) -> None:
        self._tokens.clear()

    def __contains__(self, profile_name: str) -> bool:
        return profile_name in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
