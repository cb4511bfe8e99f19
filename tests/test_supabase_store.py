"""
Tests for the Supabase remote store adapter against a fake PostgREST client.
"""

from types import SimpleNamespace

import httpx
import pytest
from postgrest import APIError

from toollender.shared.core.exceptions import (
    RemoteConflictError,
    RemoteStoreError,
    RemoteUnavailableError,
)
from toollender.shared.infrastructure.remote_store.base import (
    SERVER_TIMESTAMP,
    FieldFilter,
    OrderBy,
    ReadMode,
    WriteMode,
)
from toollender.shared.infrastructure.remote_store.supabase_store import SupabaseRemoteStoreClient


class FakeQuery:
    def __init__(self, manager, table):
        self.manager = manager
        self.ops = [("table", table)]

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.ops.append((name, args, kwargs) if kwargs else (name, *args))
            return self
        return record

    def execute(self):
        self.manager.executed.append(self.ops)
        if self.manager.errors:
            raise self.manager.errors.pop(0)
        rows = self.manager.responses.pop(0) if self.manager.responses else []
        return SimpleNamespace(data=rows)


class FakeManager:
    def __init__(self):
        self.executed = []
        self.responses = []
        self.errors = []
        self.closed = False

    def table(self, name):
        return FakeQuery(self, name)

    def close(self):
        self.closed = True


@pytest.fixture
def manager():
    return FakeManager()


@pytest.fixture
def client(manager):
    return SupabaseRemoteStoreClient(manager)


@pytest.mark.asyncio
async def test_query_builds_filters_and_order(client, manager):
    manager.responses.append([{"id": "t1", "name": "Drill", "ownerId": "u1"}])

    documents = await client.query(
        "tools",
        filters=[FieldFilter("ownerId", "u1")],
        order=OrderBy("createdAt", descending=True),
    )

    assert [d.id for d in documents] == ["t1"]
    assert documents[0].data == {"name": "Drill", "ownerId": "u1"}
    assert manager.executed[0] == [
        ("table", "tools"),
        ("select", "*"),
        ("eq", "ownerId", "u1"),
        ("order", ("createdAt",), {"desc": True}),
    ]


@pytest.mark.asyncio
async def test_cache_mode_reads_last_server_results(client, manager):
    manager.responses.append([{"id": "t1", "name": "Drill"}, {"id": "t2", "name": "Saw"}])
    await client.query("tools")

    cached = await client.query("tools", filters=[FieldFilter("name", "Saw")], mode=ReadMode.CACHE)
    missing = await client.get("tools", "t9", mode=ReadMode.CACHE)

    assert [d.id for d in cached] == ["t2"]
    assert missing is None
    assert len(manager.executed) == 1


@pytest.mark.asyncio
async def test_get_of_missing_row_returns_none(client, manager):
    assert await client.get("tools", "nope") is None


@pytest.mark.asyncio
async def test_merge_inserts_when_no_row_was_updated(client, manager):
    manager.responses.extend([[], [{"id": "u1", "associationId": "B"}]])

    await client.set("users", "u1", {"associationId": "B"}, WriteMode.MERGE)

    assert [ops[1][0] for ops in manager.executed] == ["update", "insert"]
    assert (await client.get("users", "u1", mode=ReadMode.CACHE)).data == {"associationId": "B"}


@pytest.mark.asyncio
async def test_add_serializes_server_timestamp(client, manager):
    doc_id = await client.add("associations", {"name": "Building A", "createdAt": SERVER_TIMESTAMP})

    [insert] = manager.executed
    payload = insert[1][1]
    assert payload["id"] == doc_id
    assert isinstance(payload["createdAt"], str)


@pytest.mark.asyncio
async def test_transport_errors_mean_unavailable(client, manager):
    manager.errors.append(httpx.ConnectError("no route to host"))

    with pytest.raises(RemoteUnavailableError):
        await client.query("tools")


@pytest.mark.asyncio
async def test_unique_violation_is_a_conflict(client, manager):
    manager.errors.append(APIError({"message": "duplicate key", "code": "23505", "hint": None, "details": None}))

    with pytest.raises(RemoteConflictError):
        await client.add("associations", {"name": "Building A"})


@pytest.mark.asyncio
async def test_other_api_errors_are_plain_store_errors(client, manager):
    manager.errors.append(APIError({"message": "permission denied", "code": "42501", "hint": None, "details": None}))

    with pytest.raises(RemoteStoreError) as exc_info:
        await client.delete("tools", "t1")

    assert not isinstance(exc_info.value, RemoteUnavailableError)


@pytest.mark.asyncio
async def test_close_releases_manager(client, manager):
    await client.close()

    assert manager.closed
