"""
Unit tests for the configuration synchronization engine.
"""

import pytest

from confsync.config.settings import ConfigManager, Settings
from confsync.sync.engine import ConfigurationSyncEngine
from confsync.sync.events import EventType
from confsync.sync.poller import PollerState
from confsync.utils.exceptions import ConfigurationError, ProfileGoneError
from tests.conftest import json_payload


@pytest.mark.unit
class TestEngineConstruction:
    """Test constructor validation."""

    @pytest.mark.parametrize("kwargs", [
        {"poll_interval": 0},
        {"poll_interval": -5},
        {"discovery_interval": 0},
        {"poll_interval": True},
        {"poll_interval": "30"},
        {"prefix": None},
        {"prefix": 7},
    ])
    def test_invalid_options(self, provider, kwargs):
        with pytest.raises(ConfigurationError):
            ConfigurationSyncEngine(provider, "app-1", "env-1", **kwargs)

    def test_missing_provider(self):
        with pytest.raises(ConfigurationError):
            ConfigurationSyncEngine(None, "app-1", "env-1")

    @pytest.mark.parametrize("application_id, environment_id", [
        ("", "env-1"),
        ("app-1", ""),
        (None, "env-1"),
    ])
    def test_missing_identifiers(self, provider, application_id, environment_id):
        with pytest.raises(ConfigurationError):
            ConfigurationSyncEngine(provider, application_id, environment_id)

    def test_defaults(self, provider):
        engine = ConfigurationSyncEngine(provider, "app-1", "env-1")

        assert engine.poll_interval == 30.0
        assert engine.discovery_interval == 120.0
        assert engine.cache.prefix == ""
        assert engine.purge_on_delete is False
        assert not engine.started
        assert engine.get_all() == {}

    def test_from_settings(self, provider, settings_env):
        settings_env.setenv("CONFIG_PREFIX", "dev4_")
        settings_env.setenv("CONFSYNC_POLL_INTERVAL_SECONDS", "5")
        settings_env.setenv("CONFSYNC_PURGE_ON_DELETE", "true")
        config = ConfigManager(settings=Settings())

        engine = ConfigurationSyncEngine.from_settings(provider, config)

        assert engine.application_id == "app-1"
        assert engine.environment_id == "env-1"
        assert engine.cache.prefix == "dev4_"
        assert engine.poll_interval == 5.0
        assert engine.purge_on_delete is True


@pytest.mark.unit
class TestEngineLifecycle:
    """Test start/close behaviour."""

    @pytest.mark.asyncio
    async def test_start_emits_ready_after_first_poll(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}))
        provider.add_profile("p2", "limits", json_payload({"max": 10}))
        engine = make_engine()
        ready = []
        engine.subscribe(EventType.READY, ready.append)

        await engine.start()

        assert engine.started
        assert engine.get("flags") == {"a": 1}
        assert engine.get("limits") == {"max": 10}
        assert len(ready) == 1
        assert sorted(ready[0].profile_names) == ["flags", "limits"]

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}))
        engine = make_engine()
        ready = []
        engine.subscribe(EventType.READY, ready.append)

        await engine.start()
        await engine.start()

        assert provider.list_calls == 1
        assert provider.session_calls == ["p1"]
        assert len(ready) == 1

    @pytest.mark.asyncio
    async def test_start_with_listing_failure(self, provider, make_engine):
        provider.list_error = RuntimeError("network down")
        engine = make_engine()
        ready, errors = [], []
        engine.subscribe(EventType.READY, ready.append)
        engine.subscribe(EventType.ERROR, errors.append)

        await engine.start()

        assert engine.started
        assert ready[0].profile_names == []
        assert errors[0].source == "discovery"

    @pytest.mark.asyncio
    async def test_ready_excludes_profiles_without_deployment(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}))
        provider.add_profile("p2", "draft")
        provider.no_deployment.add("p2")
        engine = make_engine()
        ready = []
        engine.subscribe(EventType.READY, ready.append)

        await engine.start()

        assert ready[0].profile_names == ["flags"]
        assert list(engine.discovery.pollers) == ["flags"]

    @pytest.mark.asyncio
    async def test_close_freezes_cache(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}), json_payload({"a": 2}))
        engine = make_engine()
        await engine.start()
        poller = engine.discovery.pollers["flags"]

        await engine.close()
        await engine.close()

        assert engine.closed
        assert poller.state is PollerState.STOPPED
        assert engine.discovery.pollers == {}
        assert len(engine.sessions) == 0
        assert len(engine.detector) == 0
        assert engine.get("flags") == {"a": 1}

        await poller.poll_once()
        assert engine.get("flags") == {"a": 1}

    @pytest.mark.asyncio
    async def test_start_after_close_is_noop(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}))
        engine = make_engine()

        await engine.close()
        await engine.start()

        assert not engine.started
        assert provider.list_calls == 0


@pytest.mark.unit
class TestEngineReads:
    """Test cache access through the engine."""

    @pytest.mark.asyncio
    async def test_change_detection_through_engine(self, provider, make_engine):
        provider.add_profile(
            "p1", "flags",
            json_payload({"a": 1}),
            json_payload({"a": 1}),
            json_payload({"a": 2}),
        )
        engine = make_engine()
        updates = []
        engine.subscribe(EventType.UPDATE, updates.append)
        await engine.start()
        poller = engine.discovery.pollers["flags"]

        await poller.poll_once()
        assert engine.get("flags") == {"a": 1}
        assert len(updates) == 1

        await poller.poll_once()
        assert engine.get("flags") == {"a": 2}
        assert len(updates) == 2

    @pytest.mark.asyncio
    async def test_prefix_resolution(self, provider, make_engine):
        provider.add_profile("p1", "dev4_featureFlags", json_payload({"x": True}))
        provider.add_profile("p2", "prod_featureFlags", json_payload({"x": False}))
        engine = make_engine(prefix="dev4_")

        await engine.start()

        assert engine.get("featureFlags") == {"x": True}
        assert list(engine.get_all()) == ["dev4_featureFlags"]
        assert engine.get("missing", "fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_deleted_profile_not_relaunched(self, provider, make_engine):
        provider.add_profile("p1", "flags", json_payload({"a": 1}), ProfileGoneError("gone"))
        engine = make_engine()
        deleted = []
        engine.subscribe(EventType.PROFILE_DELETED, deleted.append)
        await engine.start()

        await engine.discovery.pollers["flags"].poll_once()
        assert [e.profile_name for e in deleted] == ["flags"]
        assert "flags" not in engine.discovery.pollers

        provider.remove_profile("flags")
        await engine.discovery.discover()

        assert engine.discovery.pollers == {}
        assert engine.get("flags") == {"a": 1}
        assert engine.purge("flags") is True
        assert engine.get("flags") is None
        assert engine.purge("flags") is False

    @pytest.mark.asyncio
    async def test_set_prefix_rules(self, provider, make_engine):
        engine = make_engine()
        engine.set_prefix("dev4_")
        assert engine.cache.prefix == "dev4_"

        await engine.start()
        with pytest.raises(ConfigurationError):
            engine.set_prefix("prod_")
        assert engine.cache.prefix == "dev4_"

        await engine.close()
        engine.set_prefix("prod_")
        assert engine.cache.prefix == "prod_"

        with pytest.raises(ConfigurationError):
            engine.set_prefix(None)

    @pytest.mark.asyncio
    async def test_unsubscribe(self, provider, make_engine):
        engine = make_engine()
        ready = []
        engine.subscribe(EventType.READY, ready.append)
        engine.unsubscribe(EventType.READY, ready.append)

        await engine.start()

        assert ready == []

    @pytest.mark.asyncio
    async def test_stats(self, provider, make_engine):
        provider.add_profile("p1", "dev4_flags", json_payload({"a": 1}))
        engine = make_engine(prefix="dev4_")
        await engine.start()

        stats = engine.stats()

        assert stats["started"] is True
        assert stats["closed"] is False
        assert stats["prefix"] == "dev4_"
        assert stats["cached_profiles"] == 1
        assert stats["discovery_cycles"] == 1
        assert stats["pollers"]["dev4_flags"]["updates"] == 1
