"""Unit tests for the tag stores."""

import asyncio
import sqlite3

import pytest

from extensions.tags.store import InMemoryTagStore, SqliteTagStore, TagStoreError


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryTagStore()
        return
    store = SqliteTagStore(str(tmp_path / "tags.db"))
    yield store
    store.close()


class TestTagStoreContract:
    """Behaviour both store implementations share."""

    @pytest.mark.asyncio
    async def test_empty_store(self, any_store):
        assert not await any_store.has("foo")
        assert await any_store.get("foo") is None
        assert await any_store.ids() == []

    @pytest.mark.asyncio
    async def test_put_inserts(self, any_store):
        await any_store.put("foo", "bar")

        assert await any_store.has("foo")
        assert await any_store.get("foo") == "bar"

    @pytest.mark.asyncio
    async def test_put_overwrites(self, any_store):
        await any_store.put("foo", "old")
        await any_store.put("foo", "new")

        assert await any_store.get("foo") == "new"
        assert await any_store.ids() == ["foo"]

    @pytest.mark.asyncio
    async def test_remove(self, any_store):
        await any_store.put("foo", "bar")
        await any_store.put("baz", "qux")

        await any_store.remove("foo")

        assert not await any_store.has("foo")
        assert await any_store.ids() == ["baz"]

    @pytest.mark.asyncio
    async def test_remove_unknown_is_noop(self, any_store):
        await any_store.remove("foo")

        assert await any_store.ids() == []

    @pytest.mark.asyncio
    async def test_ids_are_sorted_and_case_sensitive(self, any_store):
        for tag_id in ["b", "a", "B", "ä"]:
            await any_store.put(tag_id, tag_id)

        assert await any_store.ids() == ["B", "a", "b", "ä"]

    @pytest.mark.asyncio
    async def test_empty_content_is_kept(self, any_store):
        await any_store.put("foo", "")

        assert await any_store.has("foo")
        assert await any_store.get("foo") == ""


class TestLock:
    @pytest.mark.asyncio
    async def test_same_id_is_serialized(self):
        store = InMemoryTagStore()
        order = []

        async def hold(name: str) -> None:
            async with store.lock("foo"):
                order.append(f"{name}-enter")
                await asyncio.sleep(0)
                await asyncio.sleep(0)
                order.append(f"{name}-exit")

        await asyncio.gather(hold("a"), hold("b"))

        assert order == ["a-enter", "a-exit", "b-enter", "b-exit"]

    @pytest.mark.asyncio
    async def test_different_ids_do_not_block(self):
        store = InMemoryTagStore()
        entered = asyncio.Event()

        async with store.lock("foo"):
            async def other() -> None:
                async with store.lock("bar"):
                    entered.set()

            await asyncio.wait_for(other(), timeout=1)

        assert entered.is_set()


class TestSqliteTagStore:
    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "tags.db")
        first = SqliteTagStore(path)
        await first.put("foo", "bar")
        first.close()

        second = SqliteTagStore(path)
        try:
            assert await second.get("foo") == "bar"
        finally:
            second.close()

    def test_unopenable_database_raises(self, tmp_path):
        with pytest.raises(TagStoreError):
            SqliteTagStore(str(tmp_path / "missing" / "dir" / "tags.db"))

    @pytest.mark.asyncio
    async def test_failures_are_wrapped(self, tmp_path):
        store = SqliteTagStore(str(tmp_path / "tags.db"))
        store.close()

        with pytest.raises(TagStoreError) as excinfo:
            await store.put("foo", "bar")

        assert isinstance(excinfo.value.__cause__, sqlite3.Error)

    @pytest.mark.asyncio
    async def test_unencodable_text_is_wrapped(self, tmp_path):
        store = SqliteTagStore(str(tmp_path / "tags.db"))
        try:
            with pytest.raises(TagStoreError) as excinfo:
                await store.put("foo", "a\ud800b")

            assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)
            assert await store.ids() == []
        finally:
            store.close()
