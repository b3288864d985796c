"""Tests for the API client and its query cache."""

import asyncio

import pytest

from todocockpit.client import (
    CockpitClient,
    ClientError,
    QueryCache,
    CATEGORIES,
    LABELS,
    TODOS,
)


@pytest.fixture
def api(client):
    """CockpitClient talking to the test app."""
    return CockpitClient(client)


class TestQueryCache:
    """Tests for QueryCache."""

    def test_set_and_get(self):
        """Test a fresh entry is returned."""
        cache = QueryCache()
        cache.set((TODOS, ""), [1])
        assert cache.get((TODOS, "")) == [1]
        assert cache.is_valid((TODOS, ""))

    def test_expired_entry(self):
        """Test an entry past its TTL is dropped."""
        cache = QueryCache(ttl_seconds=0)
        cache.set((LABELS,), ["x"])
        assert cache.get((LABELS,)) is None
        assert cache.keys() == []

    def test_invalidate_by_entity(self):
        """Test invalidation drops every key of an entity type only."""
        cache = QueryCache()
        cache.set((TODOS, None), [])
        cache.set((TODOS, "work"), [])
        cache.set((CATEGORIES,), [])

        cache.invalidate(TODOS)

        assert cache.keys() == [(CATEGORIES,)]

    def test_invalidate_everything(self):
        """Test invalidate without arguments clears the cache."""
        cache = QueryCache()
        cache.set((TODOS, None), [])
        cache.set((LABELS,), [])

        cache.invalidate()

        assert cache.keys() == []

    @pytest.mark.asyncio
    async def test_concurrent_fetches_share_one_call(self):
        """Test concurrent readers of one key trigger a single fetch."""
        cache = QueryCache()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0)
            return ["data"]

        results = await asyncio.gather(*(cache.get_or_fetch((LABELS,), fetch) for _ in range(5)))

        assert calls == 1
        assert all(r == ["data"] for r in results)

    @pytest.mark.asyncio
    async def test_invalidate_during_fetch_is_not_cached(self):
        """Test a result fetched across an invalidation is returned but not kept."""
        cache = QueryCache()
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_fetch():
            started.set()
            await release.wait()
            return ["stale"]

        reader = asyncio.create_task(cache.get_or_fetch((TODOS, None), slow_fetch))
        await started.wait()
        cache.invalidate(TODOS)
        release.set()

        assert await reader == ["stale"]
        assert cache.get((TODOS, None)) is None

    @pytest.mark.asyncio
    async def test_clear_during_fetch_is_not_cached(self):
        """Test clearing the whole cache also discards an in-flight result."""
        cache = QueryCache()
        release = asyncio.Event()

        async def slow_fetch():
            await release.wait()
            return ["stale"]

        reader = asyncio.create_task(cache.get_or_fetch((LABELS,), slow_fetch))
        await asyncio.sleep(0)
        cache.invalidate()
        release.set()

        assert await reader == ["stale"]
        assert cache.keys() == []

    @pytest.mark.asyncio
    async def test_other_entity_invalidation_keeps_result(self):
        """Test invalidating another entity type does not discard the fetch."""
        cache = QueryCache()
        release = asyncio.Event()

        async def slow_fetch():
            await release.wait()
            return ["fresh"]

        reader = asyncio.create_task(cache.get_or_fetch((LABELS,), slow_fetch))
        await asyncio.sleep(0)
        cache.invalidate(TODOS)
        release.set()

        assert await reader == ["fresh"]
        assert cache.get((LABELS,)) == ["fresh"]


class TestCockpitClient:
    """Tests for CockpitClient against the app."""

    @pytest.mark.asyncio
    async def test_reads_are_cached_until_mutation(self, api, client):
        """Test a read is served from cache until the client mutates."""
        await api.add_category("Work")
        assert [c["name"] for c in await api.list_categories()] == ["Work"]

        # Written behind the client's back
        await client.post("/api/categories", json={"name": "Home"})
        assert [c["name"] for c in await api.list_categories()] == ["Work"]

        await api.add_category("Gym")
        assert [c["name"] for c in await api.list_categories()] == ["Work", "Home", "Gym"]

    @pytest.mark.asyncio
    async def test_move_category_replaces_cache(self, api):
        """Test the reorder response becomes the cached list."""
        work = await api.add_category("Work")
        home = await api.add_category("Home")

        result = await api.move_category(home["id"], work["id"])

        assert [c["name"] for c in result] == ["Home", "Work"]
        assert api.cache.get((CATEGORIES,)) == result

    @pytest.mark.asyncio
    async def test_delete_category_invalidates_todos(self, api):
        """Test todos are re-fetched after their category is deleted."""
        work = await api.add_category("Work")
        todo = await api.add_todo("Report", categoryId=work["id"])
        assert [t["id"] for t in await api.list_todos(work["id"])] == [todo["id"]]
        assert await api.list_todos("") == []

        await api.delete_category(work["id"])

        assert await api.list_categories() == []
        inbox = await api.list_todos("")
        assert [t["id"] for t in inbox] == [todo["id"]]

    @pytest.mark.asyncio
    async def test_delete_label_invalidates_todos(self, api):
        """Test cached todos lose a deleted label."""
        label = await api.add_label("urgent", "#FF0000")
        todo = await api.add_todo("Call bank", labels=[label["id"]])
        assert (await api.list_todos())[0]["labels"] == [label["id"]]

        await api.delete_label(label["id"])

        assert await api.list_labels() == []
        assert (await api.list_todos())[0]["id"] == todo["id"]
        assert (await api.list_todos())[0]["labels"] == []

    @pytest.mark.asyncio
    async def test_statistics_follow_todo_changes(self, api):
        """Test statistics are refreshed after a todo update."""
        todo = await api.add_todo("Buy milk")
        assert (await api.statistics())["completed"] == 0

        await api.update_todo(todo["id"], status="DONE")

        assert (await api.statistics())["completed"] == 1

    @pytest.mark.asyncio
    async def test_move_todo_adopts_target_status(self, api):
        """Test dropping onto a todo of another status moves it there."""
        a = await api.add_todo("A", status="TODO")
        b = await api.add_todo("B", status="DONE")

        result = await api.move_todo([a, b], a["id"], b["id"])

        assert {t["id"]: t["status"] for t in result} == {a["id"]: "DONE", b["id"]: "DONE"}
        assert [t["id"] for t in result] == [b["id"], a["id"]]

    @pytest.mark.asyncio
    async def test_error_response(self, api):
        """Test API errors surface as ClientError with the message."""
        with pytest.raises(ClientError) as exc_info:
            await api.update_todo("missing", title="x")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Todo not found"

    @pytest.mark.asyncio
    async def test_failed_mutation_keeps_cache(self, api):
        """Test a rejected reorder leaves the cached categories alone."""
        await api.add_category("Work")
        cached = await api.list_categories()

        with pytest.raises(ClientError):
            await api.reorder_categories([{"id": "missing", "position": 0}])

        assert api.cache.get((CATEGORIES,)) == cached
