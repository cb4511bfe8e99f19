"""
Tests for the cache-first tool repository.
"""

import asyncio
import time

import pytest

from tests.conftest import tool_fields
from toollender.shared.core.exceptions import (
    DecodeError,
    NotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    ValidationError,
)
from toollender.shared.infrastructure.remote_store.base import ReadMode
from toollender.shared.infrastructure.remote_store.memory_store import InMemoryRemoteStoreClient
from toollender.modules.tool_lending.domain.models.tool import ToolDraft
from toollender.modules.tool_lending.infrastructure.repositories import ToolRepositoryImpl


def names(tools):
    return [t.name for t in tools]


@pytest.fixture
def seeded(remote):
    remote.seed("tools", "t1", tool_fields("Drill", minutes=1))
    remote.seed("tools", "t2", tool_fields("Saw", owner="owner-2", minutes=2))
    remote.seed("tools", "t3", tool_fields("Ladder", minutes=3))
    return remote


class TestFetchAll:

    @pytest.mark.asyncio
    async def test_server_read_is_newest_first_and_cached(self, tool_repository, seeded, local_store):
        tools = await tool_repository.fetch_all(ReadMode.SERVER)

        assert names(tools) == ["Ladder", "Saw", "Drill"]
        assert sorted(r["id"] for r in local_store.load("tools")) == ["t1", "t2", "t3"]

    @pytest.mark.asyncio
    async def test_cache_miss_waits_for_server(self, tool_repository, seeded):
        tools = await tool_repository.fetch_all(ReadMode.CACHE)

        assert names(tools) == ["Ladder", "Saw", "Drill"]
        assert seeded.count_calls("query", "server") == 1

    @pytest.mark.asyncio
    async def test_cache_hit_does_not_wait_for_slow_server(self, tool_repository, seeded, synchronizer):
        await tool_repository.fetch_all(ReadMode.SERVER)
        seeded.latency = 0.5

        started = time.perf_counter()
        tools = await tool_repository.fetch_all(ReadMode.CACHE)
        elapsed = time.perf_counter() - started

        assert names(tools) == ["Ladder", "Saw", "Drill"]
        assert elapsed < 0.25
        assert synchronizer.is_pending("tools")
        await synchronizer.drain()

    @pytest.mark.asyncio
    async def test_cache_hit_refresh_is_seen_by_next_read(self, tool_repository, seeded, synchronizer):
        await tool_repository.fetch_all(ReadMode.SERVER)
        seeded.seed("tools", "t4", tool_fields("Hammer", minutes=4))

        stale = await tool_repository.fetch_all(ReadMode.CACHE)
        await synchronizer.drain()
        fresh = await tool_repository.fetch_all(ReadMode.CACHE)

        assert "Hammer" not in names(stale)
        assert names(fresh)[0] == "Hammer"
        await synchronizer.drain()

    @pytest.mark.asyncio
    async def test_repeated_cache_hits_share_one_refresh(self, tool_repository, seeded, synchronizer):
        await tool_repository.fetch_all(ReadMode.SERVER)
        seeded.latency = 0.05

        await asyncio.gather(*(tool_repository.fetch_all(ReadMode.CACHE) for _ in range(5)))
        await synchronizer.drain()

        assert seeded.count_calls("query", "server") == 2
        assert synchronizer.stats["coalesced"] == 4

    @pytest.mark.asyncio
    async def test_offline_server_read_serves_cached_tools(self, tool_repository, seeded):
        await tool_repository.fetch_all(ReadMode.SERVER)
        seeded.online = False

        tools = await tool_repository.fetch_all(ReadMode.SERVER)

        assert names(tools) == ["Ladder", "Saw", "Drill"]

    @pytest.mark.asyncio
    async def test_offline_with_nothing_cached_is_empty(self, tool_repository, seeded):
        seeded.online = False

        assert await tool_repository.fetch_all(ReadMode.SERVER) == []

    @pytest.mark.asyncio
    async def test_owner_read_is_not_mistaken_for_full_list(self, tool_repository, seeded, synchronizer):
        await tool_repository.fetch_by_owner("owner-1", ReadMode.SERVER)

        tools = await tool_repository.fetch_all(ReadMode.CACHE)

        assert names(tools) == ["Ladder", "Saw", "Drill"]
        assert seeded.count_calls("query", "server") == 2
        await synchronizer.drain()

    @pytest.mark.asyncio
    async def test_offline_owner_tools_stay_out_of_full_list(self, tool_repository, seeded):
        await tool_repository.fetch_by_owner("owner-1", ReadMode.SERVER)
        seeded.online = False

        assert await tool_repository.fetch_all(ReadMode.SERVER) == []
        assert names(await tool_repository.fetch_by_owner("owner-1", ReadMode.SERVER)) == ["Ladder", "Drill"]

    @pytest.mark.asyncio
    async def test_malformed_documents_are_skipped(self, tool_repository, remote):
        remote.seed("tools", "good", tool_fields("Drill"))
        remote.seed("tools", "bad", {"description": "No name", "ownerId": "o", "category": "c"})

        tools = await tool_repository.fetch_all(ReadMode.SERVER)

        assert [t.id for t in tools] == ["good"]

    @pytest.mark.asyncio
    async def test_legacy_field_names_are_read(self, tool_repository, remote):
        fields = tool_fields("Drill")
        fields["ownerUID"] = fields.pop("ownerId")
        remote.seed("tools", "t1", fields)

        tools = await tool_repository.fetch_all(ReadMode.SERVER)

        assert tools[0].owner_id == "owner-1"


class TestFetchByOwner:

    @pytest.mark.asyncio
    async def test_only_owner_tools_are_returned(self, tool_repository, seeded):
        tools = await tool_repository.fetch_by_owner("owner-1", ReadMode.SERVER)

        assert names(tools) == ["Ladder", "Drill"]
        assert all(t.owner_id == "owner-1" for t in tools)

    @pytest.mark.asyncio
    async def test_owner_refresh_keeps_other_owners_cached(self, tool_repository, seeded, local_store):
        await tool_repository.fetch_all(ReadMode.SERVER)
        seeded._server["tools"].pop("t1")
        seeded._server["tools"].pop("t3")

        assert await tool_repository.fetch_by_owner("owner-1", ReadMode.SERVER) == []
        assert [r["id"] for r in local_store.load("tools")] == ["t2"]

    @pytest.mark.asyncio
    async def test_cached_owner_read_never_leaks_other_owners(self, tool_repository, seeded, synchronizer):
        await tool_repository.fetch_all(ReadMode.SERVER)

        tools = await tool_repository.fetch_by_owner("owner-2", ReadMode.CACHE)

        assert names(tools) == ["Saw"]
        await synchronizer.drain()


class TestFetchOne:

    @pytest.mark.asyncio
    async def test_missing_tool_raises_not_found(self, tool_repository, remote):
        with pytest.raises(NotFoundError):
            await tool_repository.fetch_one("nope", ReadMode.SERVER)

    @pytest.mark.asyncio
    async def test_malformed_document_raises_decode_error(self, tool_repository, remote):
        remote.seed("tools", "bad", {"name": "Drill"})

        with pytest.raises(DecodeError):
            await tool_repository.fetch_one("bad", ReadMode.SERVER)

    @pytest.mark.asyncio
    async def test_offline_serves_cached_copy(self, tool_repository, seeded):
        await tool_repository.fetch_one("t1", ReadMode.SERVER)
        seeded.online = False

        tool = await tool_repository.fetch_one("t1", ReadMode.SERVER)

        assert tool.name == "Drill"

    @pytest.mark.asyncio
    async def test_offline_without_cached_copy_raises(self, tool_repository, seeded):
        seeded.online = False

        with pytest.raises(RemoteUnavailableError):
            await tool_repository.fetch_one("t1", ReadMode.CACHE)


class TestWrites:

    @pytest.mark.asyncio
    async def test_create_then_fetch_round_trip(self, tool_repository, synchronizer):
        draft = ToolDraft(name=" Drill ", description="Cordless", owner_id="owner-1", category="Building A")

        created = await tool_repository.create(draft)
        fetched = await tool_repository.fetch_one(created.id, ReadMode.CACHE)

        assert created.name == "Drill"
        assert created.created_at is not None
        assert created.is_on_hold is False
        assert created.image_url is None
        assert fetched == created
        await synchronizer.drain()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "description", "owner_id", "category"])
    async def test_create_rejects_blank_fields_without_writing(self, tool_repository, remote, missing):
        values = {"name": "Drill", "description": "Cordless", "owner_id": "owner-1", "category": "A"}
        values[missing] = "   "

        with pytest.raises(ValidationError) as exc_info:
            await tool_repository.create(ToolDraft(**values))

        assert exc_info.value.details["field"] == missing
        assert remote.write_count == 0

    @pytest.mark.asyncio
    async def test_toggle_hold_alternates(self, tool_repository, seeded):
        tool = await tool_repository.fetch_one("t1", ReadMode.SERVER)

        held = await tool_repository.toggle_hold(tool)
        released = await tool_repository.toggle_hold(held)

        assert held.is_on_hold is True
        assert released.is_on_hold is False
        assert seeded.server_snapshot("tools")["t1"]["isOnHold"] is False

    @pytest.mark.asyncio
    async def test_toggle_hold_updates_cached_copy(self, tool_repository, seeded):
        tool = await tool_repository.fetch_one("t1", ReadMode.SERVER)
        await tool_repository.toggle_hold(tool)
        seeded.online = False

        assert (await tool_repository.fetch_one("t1", ReadMode.SERVER)).is_on_hold is True

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, tool_repository, seeded, local_store):
        await tool_repository.fetch_all(ReadMode.SERVER)

        await tool_repository.update("t1", {"pricePerDay": 25.0})

        assert seeded.server_snapshot("tools")["t1"]["name"] == "Drill"
        assert seeded.server_snapshot("tools")["t1"]["pricePerDay"] == 25.0
        assert local_store.load_one("tools", "t1").value["pricePerDay"] == 25.0

    @pytest.mark.asyncio
    async def test_empty_update_does_not_write(self, tool_repository, remote):
        await tool_repository.update("t1", {})

        assert remote.write_count == 0

    @pytest.mark.asyncio
    async def test_delete_removes_tool_everywhere(self, tool_repository, seeded):
        await tool_repository.fetch_all(ReadMode.SERVER)

        await tool_repository.delete("t1")
        seeded.online = False

        assert "t1" not in seeded.server_snapshot("tools")
        assert "Drill" not in names(await tool_repository.fetch_all(ReadMode.SERVER))
        with pytest.raises(RemoteUnavailableError):
            await tool_repository.fetch_one("t1", ReadMode.CACHE)

    @pytest.mark.asyncio
    async def test_offline_write_raises(self, tool_repository, seeded):
        seeded.online = False

        with pytest.raises(RemoteUnavailableError):
            await tool_repository.delete("t1")


class ErroringServer(InMemoryRemoteStoreClient):
    """Server that answers server-mode reads with an HTTP 500 once ``erroring`` is set."""

    erroring = False

    async def query(self, collection, filters=(), order=None, mode=ReadMode.SERVER):
        if self.erroring and mode is ReadMode.SERVER:
            raise RemoteStoreError("HTTP 500 from server", operation="query", collection=collection)
        return await super().query(collection, filters, order, mode)

    async def get(self, collection, doc_id, mode=ReadMode.SERVER):
        if self.erroring and mode is ReadMode.SERVER:
            raise RemoteStoreError("HTTP 500 from server", operation="get", collection=collection)
        return await super().get(collection, doc_id, mode)


@pytest.fixture
def erroring_repository(local_store, synchronizer):
    remote = ErroringServer()
    remote.seed("tools", "t1", tool_fields("Drill", minutes=1))
    remote.seed("tools", "t2", tool_fields("Saw", owner="owner-2", minutes=2))
    return ToolRepositoryImpl(remote, local_store, synchronizer)


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_collection_reads_serve_cached_tools(self, erroring_repository):
        await erroring_repository.fetch_all(ReadMode.SERVER)
        await erroring_repository.fetch_by_owner("owner-2", ReadMode.SERVER)
        erroring_repository.remote.erroring = True

        assert names(await erroring_repository.fetch_all(ReadMode.SERVER)) == ["Saw", "Drill"]
        assert names(await erroring_repository.fetch_by_owner("owner-2", ReadMode.SERVER)) == ["Saw"]

    @pytest.mark.asyncio
    async def test_collection_read_with_nothing_cached_is_empty(self, erroring_repository):
        erroring_repository.remote.erroring = True

        assert await erroring_repository.fetch_all(ReadMode.SERVER) == []

    @pytest.mark.asyncio
    async def test_single_tool_read_still_raises(self, erroring_repository):
        await erroring_repository.fetch_one("t1", ReadMode.SERVER)
        erroring_repository.remote.erroring = True

        with pytest.raises(RemoteStoreError) as exc_info:
            await erroring_repository.fetch_one("t1", ReadMode.SERVER)

        assert not isinstance(exc_info.value, RemoteUnavailableError)
