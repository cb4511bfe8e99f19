"""
Tests for settings validation and container wiring.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from tests.conftest import tool_fields
from toollender.container import RECONNECT_REFRESH_KEY, build_container, lifespan
from toollender.shared.config.settings import Settings
from toollender.shared.core.exceptions import ConfigurationError
from toollender.shared.infrastructure.cache.local_store import FileLocalStore
from toollender.shared.infrastructure.connectivity.probe import ReachabilityProbe
from toollender.shared.infrastructure.remote_store.base import ReadMode
from toollender.shared.infrastructure.remote_store.memory_store import InMemoryRemoteStoreClient


class TestSettings:

    def test_backends_are_normalized(self):
        settings = Settings(_env_file=None, REMOTE_STORE_BACKEND="Memory", LOCAL_STORE_BACKEND="REDIS")

        assert settings.REMOTE_STORE_BACKEND == "memory"
        assert settings.LOCAL_STORE_BACKEND == "redis"

    @pytest.mark.parametrize("overrides", [
        {"REMOTE_STORE_BACKEND": "firebase"},
        {"LOCAL_STORE_BACKEND": "sqlite"},
        {"LOG_LEVEL": "chatty"},
        {"CONNECTIVITY_PROBE_INTERVAL": 0},
    ])
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, **overrides)

    def test_probe_url_falls_back_to_supabase_url(self):
        settings = Settings(_env_file=None, SUPABASE_URL="https://project.supabase.co", CONNECTIVITY_PROBE_URL=None)

        assert settings.probe_url == "https://project.supabase.co"

    def test_explicit_probe_url_wins(self):
        settings = Settings(
            _env_file=None,
            SUPABASE_URL="https://project.supabase.co",
            CONNECTIVITY_PROBE_URL="https://status.example.com",
        )

        assert settings.probe_url == "https://status.example.com"


class TestBuildContainer:

    def test_memory_backend_wiring(self, settings):
        container = build_container(settings)

        assert isinstance(container.remote, InMemoryRemoteStoreClient)
        assert isinstance(container.local_store, FileLocalStore)
        assert container.local_store.directory == settings.LOCAL_CACHE_DIR
        assert container.tool_repository.synchronizer is container.synchronizer
        assert container.user_repository.local_store is container.local_store
        assert container.monitor.probe is None

    def test_collection_names_come_from_settings(self, settings):
        settings.TOOLS_COLLECTION = "tl_tools"

        assert build_container(settings).tool_repository.collection == "tl_tools"

    def test_probe_is_built_from_probe_url(self, settings):
        settings.CONNECTIVITY_PROBE_URL = "https://status.example.com"

        probe = build_container(settings).monitor.probe

        assert isinstance(probe, ReachabilityProbe)
        assert probe.url == "https://status.example.com"
        assert probe.interval == settings.CONNECTIVITY_PROBE_INTERVAL

    def test_supabase_backend_requires_credentials(self, settings):
        settings.REMOTE_STORE_BACKEND = "supabase"

        with pytest.raises(ConfigurationError):
            build_container(settings)

    def test_services_need_their_collaborators(self, settings):
        container = build_container(settings)

        with pytest.raises(ConfigurationError):
            container.account_service
        with pytest.raises(ConfigurationError):
            container.tool_upload_service


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_reconnect_reloads_tools(self, settings):
        container = build_container(settings)
        await container.start(configure_logging=False)
        container.remote.seed("tools", "t1", tool_fields("Drill"))

        await container.monitor.update(False)
        await container.monitor.update(True)
        await container.synchronizer.drain()

        assert [r["id"] for r in container.local_store.load("tools")] == ["t1"]
        assert container.remote.count_calls("query", ReadMode.SERVER.value) == 1
        await container.shutdown()

    @pytest.mark.asyncio
    async def test_going_offline_schedules_nothing(self, settings):
        container = build_container(settings)
        await container.start(configure_logging=False)

        await container.monitor.update(False)

        assert not container.synchronizer.is_pending(RECONNECT_REFRESH_KEY)
        await container.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_stops_reacting_to_connectivity(self, settings):
        container = build_container(settings)
        await container.start(configure_logging=False)
        await container.shutdown()

        await container.monitor.update(True)

        assert container.synchronizer.get_stats()["scheduled"] == 0
        assert not container.monitor.is_started

    @pytest.mark.asyncio
    async def test_lifespan_starts_and_stops(self, settings, monkeypatch):
        container = build_container(settings)
        monkeypatch.setattr("toollender.container.setup_logging", lambda: None)

        async with lifespan(container) as running:
            assert running.monitor.is_started

        assert not container.monitor.is_started
