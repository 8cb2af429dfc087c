"""
Configuration Provider Interface

Data types exchanged with the remote configuration store and the
capability the synchronization engine consumes. Provider implementations
translate their vendor errors into ProviderError / ProfileGoneError.
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Profile:
    """A named configuration unit at the provider."""
    id: str
    name: str


@dataclass
class ProfilePage:
    """One page of a paginated profile listing."""
    items: list[Profile] = field(default_factory=list)
    next_token: str | None = None


@dataclass
class LatestConfiguration:
    """Result of a single pull against the provider."""
    payload: bytes | None = None
    content_type: str | None = None
    version: int | None = None
    next_token: str | None = None


@runtime_checkable
class ConfigurationProvider(Protocol):
    """Remote configuration store capability."""

    async def list_profiles_page(
        self,
        application_id: str,
        next_token: str | None = None,
    ) -> ProfilePage:
        """Return one page of profiles; follow next_token until it is None."""
        ...

    async def start_session(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
    ) -> str | None:
        """Start a pull session and return the initial continuation token."""
        ...

    async def get_latest(self, token: str) -> LatestConfiguration:
        """Pull the latest configuration for the session behind token."""
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...
