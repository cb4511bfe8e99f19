"""
Shared fixtures for the ToolLender data layer tests.

Repositories run against the in-memory remote store and a file-backed
Local Store in a temporary directory.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from toollender.shared.config.settings import Settings
from toollender.shared.infrastructure.cache.local_store import FileLocalStore
from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer
from toollender.shared.infrastructure.remote_store.memory_store import InMemoryRemoteStoreClient
from toollender.modules.tool_lending.infrastructure.repositories import (
    AssociationRepositoryImpl,
    ToolRepositoryImpl,
    UserRepositoryImpl,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def tool_fields(name, owner="owner-1", category="Building A", minutes=0, **overrides):
    """Document fields for a tool created ``minutes`` after BASE_TIME."""
    fields = {
        "name": name,
        "description": f"{name} for lending",
        "ownerId": owner,
        "category": category,
        "imageURL": "",
        "isOnHold": False,
        "createdAt": BASE_TIME + timedelta(minutes=minutes),
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        REMOTE_STORE_BACKEND="memory",
        LOCAL_STORE_BACKEND="file",
        LOCAL_CACHE_DIR=tmp_path / "cache",
        SUPABASE_URL=None,
        CONNECTIVITY_PROBE_URL=None,
    )


@pytest.fixture
def remote() -> InMemoryRemoteStoreClient:
    return InMemoryRemoteStoreClient()


@pytest.fixture
def local_store(tmp_path: Path) -> FileLocalStore:
    return FileLocalStore(tmp_path / "cache")


@pytest.fixture
def synchronizer() -> CacheSynchronizer:
    return CacheSynchronizer()


@pytest.fixture
def tool_repository(remote, local_store, synchronizer) -> ToolRepositoryImpl:
    return ToolRepositoryImpl(remote, local_store, synchronizer)


@pytest.fixture
def user_repository(remote, local_store, synchronizer) -> UserRepositoryImpl:
    return UserRepositoryImpl(remote, local_store, synchronizer)


@pytest.fixture
def association_repository(remote, local_store, synchronizer) -> AssociationRepositoryImpl:
    return AssociationRepositoryImpl(remote, local_store, synchronizer)
