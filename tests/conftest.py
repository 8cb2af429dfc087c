"""
Pytest configuration and shared fixtures for confsync tests.
"""

import json
import logging
from typing import Any

import pytest

from confsync.providers.base import LatestConfiguration, Profile, ProfilePage
from confsync.sync.engine import ConfigurationSyncEngine

# Configure test logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def json_payload(data: Any, version: int | None = 1, content_type: str = "application/json") -> LatestConfiguration:
    """Scripted pull result carrying a JSON document."""
    return LatestConfiguration(
        payload=json.dumps(data).encode("utf-8"),
        content_type=content_type,
        version=version,
    )


def raw_payload(text: str, content_type: str | None = None, version: int | None = None) -> LatestConfiguration:
    """Scripted pull result carrying arbitrary text."""
    return LatestConfiguration(payload=text.encode("utf-8"), content_type=content_type, version=version)


class FakeProvider:
    """In-memory ConfigurationProvider driven by per-profile scripts.

    Each get_latest call for a profile consumes the next scripted item; the
    last item repeats once the script is exhausted. Exceptions in a script
    are raised instead of returned.
    """

    def __init__(self, page_size: int = 50):
        self.page_size = page_size
        self.profiles: list[Profile] = []
        self.scripts: dict[str, list[Any]] = {}
        self.no_deployment: set[str] = set()
        self.session_errors: dict[str, Exception] = {}
        self.list_error: Exception | None = None

        self.list_calls = 0
        self.session_calls: list[str] = []
        self.tokens_seen: list[str] = []
        self.pull_counts: dict[str, int] = {}
        self.closed = False

    def add_profile(self, profile_id: str, name: str, *script: Any) -> Profile:
        profile = Profile(id=profile_id, name=name)
        self.profiles.append(profile)
        self.scripts[profile_id] = list(script)
        return profile

    def remove_profile(self, name: str) -> None:
        self.profiles = [p for p in self.profiles if p.name != name]

    def script(self, profile_id: str, *items: Any) -> None:
        """Append items to a profile's script."""
        self.scripts.setdefault(profile_id, []).extend(items)

    async def list_profiles_page(self, application_id: str, next_token: str | None = None) -> ProfilePage:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error

        start = int(next_token) if next_token else 0
        end = start + self.page_size
        return ProfilePage(
            items=list(self.profiles[start:end]),
            next_token=str(end) if end < len(self.profiles) else None,
        )

    async def start_session(self, application_id: str, environment_id: str, profile_id: str) -> str | None:
        self.session_calls.append(profile_id)
        if profile_id in self.session_errors:
            raise self.session_errors[profile_id]
        if profile_id in self.no_deployment:
            return None
        return f"{profile_id}:0"

    async def get_latest(self, token: str) -> LatestConfiguration:
        self.tokens_seen.append(token)
        profile_id = token.rsplit(":", 1)[0]
        count = self.pull_counts.get(profile_id, 0)
        self.pull_counts[profile_id] = count + 1

        script = self.scripts.get(profile_id, [])
        next_token = f"{profile_id}:{count + 1}"
        if not script:
            return LatestConfiguration(next_token=next_token)

        item = script[min(count, len(script) - 1)]
        if isinstance(item, Exception):
            raise item
        return LatestConfiguration(
            payload=item.payload,
            content_type=item.content_type,
            version=item.version,
            next_token=item.next_token or next_token,
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def provider():
    """Scripted in-memory provider."""
    return FakeProvider()


@pytest.fixture
async def make_engine(provider):
    """Factory for engines that are closed after the test."""
    engines: list[ConfigurationSyncEngine] = []

    def factory(**kwargs) -> ConfigurationSyncEngine:
        kwargs.setdefault("poll_interval", 3600)
        kwargs.setdefault("discovery_interval", 3600)
        engine = ConfigurationSyncEngine(provider, "app-1", "env-1", **kwargs)
        engines.append(engine)
        return engine

    yield factory

    for engine in engines:
        await engine.close()


@pytest.fixture
def settings_env(monkeypatch):
    """Minimal environment for a valid ConfigManager."""
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("APPCONFIG_APPLICATION_ID", "app-1")
    monkeypatch.setenv("APPCONFIG_ENVIRONMENT_ID", "env-1")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    return monkeypatch
