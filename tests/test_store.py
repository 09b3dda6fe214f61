"""Unit tests for document store implementations - SQLite and memory, no network."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from xlist.exceptions import ConfigError, StoreError
from xlist.store import MemoryStore, RedisStore, SQLiteStore, create_store
from xlist.store.base import Filter, format_timestamp
from xlist.config import DirectoryConfig, StoreBackend


T0 = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    """Each store test runs against both local backends."""
    if request.param == "sqlite":
        return SQLiteStore(str(tmp_path / "test_store.db"))
    return MemoryStore()


class TestStoreBasics:
    """Test point operations."""

    @pytest.mark.asyncio
    async def test_insert_and_get(self, store):
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane", "followersCount": 5})
            doc = await store.get("profiles", doc_id)

            assert doc["id"] == doc_id
            assert doc["username"] == "jane"
            assert doc["followersCount"] == 5

    @pytest.mark.asyncio
    async def test_generated_ids_unique(self, store):
        async with store:
            ids = {await store.insert("profiles", {"n": i}) for i in range(5)}
            assert len(ids) == 5

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        async with store:
            assert await store.get("profiles", "nope") is None

    @pytest.mark.asyncio
    async def test_collections_are_separate(self, store):
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane"})
            assert await store.get("profileClicks", doc_id) is None

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, store):
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane", "bio": "old"})
            assert await store.update("profiles", doc_id, {"bio": "new", "location": "Berlin"})

            doc = await store.get("profiles", doc_id)
            assert doc["username"] == "jane"
            assert doc["bio"] == "new"
            assert doc["location"] == "Berlin"

    @pytest.mark.asyncio
    async def test_update_unsets_fields(self, store):
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane", "bio": "old"})
            await store.update("profiles", doc_id, {}, unset_fields=["bio"])

            doc = await store.get("profiles", doc_id)
            assert "bio" not in doc

    @pytest.mark.asyncio
    async def test_update_missing_returns_false(self, store):
        async with store:
            assert await store.update("profiles", "nope", {"bio": "x"}) is False

    @pytest.mark.asyncio
    async def test_delete(self, store):
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane"})
            assert await store.delete("profiles", doc_id) is True
            assert await store.get("profiles", doc_id) is None
            assert await store.delete("profiles", doc_id) is False

    @pytest.mark.asyncio
    async def test_clear_one_collection(self, store):
        async with store:
            await store.insert("profiles", {"username": "jane"})
            await store.insert("profileClicks", {"profileId": "p1"})
            await store.clear("profileClicks")

            assert len(await store.query("profiles")) == 1
            assert await store.query("profileClicks") == []

    @pytest.mark.asyncio
    async def test_ping(self, store):
        async with store:
            assert await store.ping() is True


class TestStoreTimestamps:
    """Test datetime encoding."""

    @pytest.mark.asyncio
    async def test_datetime_stored_as_utc_string(self, store):
        async with store:
            local = T0.astimezone(timezone(timedelta(hours=2)))
            doc_id = await store.insert("profileClicks", {"clickedAt": local})
            doc = await store.get("profileClicks", doc_id)

            assert doc["clickedAt"] == "2026-10-01T12:00:00.000000Z"

    def test_naive_datetime_taken_as_utc(self):
        assert format_timestamp(datetime(2026, 10, 1, 12, 0)) == "2026-10-01T12:00:00.000000Z"

    def test_encoding_preserves_order(self):
        earlier = format_timestamp(T0)
        later = format_timestamp(T0 + timedelta(microseconds=1))
        assert earlier < later


class TestStoreQuery:
    """Test filters and ordering."""

    @pytest.mark.asyncio
    async def test_equality_filter(self, store):
        async with store:
            await store.insert("profiles", {"category": "Design"})
            await store.insert("profiles", {"category": "AI"})
            await store.insert("profiles", {"category": "Design"})

            results = await store.query("profiles", [Filter("category", "==", "Design")])
            assert len(results) == 2
            assert all(r["category"] == "Design" for r in results)

    @pytest.mark.asyncio
    async def test_range_filter_inclusive(self, store):
        async with store:
            for hours in range(5):
                await store.insert("profileClicks", {"clickedAt": T0 + timedelta(hours=hours)})

            results = await store.query(
                "profileClicks",
                [
                    Filter("clickedAt", ">=", T0 + timedelta(hours=1)),
                    Filter("clickedAt", "<=", T0 + timedelta(hours=3)),
                ],
            )
            assert len(results) == 3

    @pytest.mark.asyncio
    async def test_filters_are_anded(self, store):
        async with store:
            await store.insert("profileClicks", {"profileId": "a", "clickedAt": T0})
            await store.insert("profileClicks", {"profileId": "b", "clickedAt": T0})

            results = await store.query(
                "profileClicks",
                [Filter("profileId", "==", "a"), Filter("clickedAt", ">=", T0)],
            )
            assert [r["profileId"] for r in results] == ["a"]

    @pytest.mark.asyncio
    async def test_missing_field_never_matches(self, store):
        async with store:
            await store.insert("profiles", {"username": "jane"})
            results = await store.query("profiles", [Filter("followersCount", ">=", 0)])
            assert results == []

    @pytest.mark.asyncio
    async def test_order_by_descending(self, store):
        async with store:
            for hours in (2, 0, 1):
                await store.insert("profileClicks", {"clickedAt": T0 + timedelta(hours=hours)})

            results = await store.query("profileClicks", order_by="clickedAt", descending=True)
            stamps = [r["clickedAt"] for r in results]
            assert stamps == sorted(stamps, reverse=True)

    @pytest.mark.asyncio
    async def test_order_by_missing_field_last(self, store):
        async with store:
            await store.insert("profiles", {"username": "none"})
            await store.insert("profiles", {"username": "low", "followersCount": 1})
            await store.insert("profiles", {"username": "high", "followersCount": 9})

            asc = await store.query("profiles", order_by="followersCount")
            desc = await store.query("profiles", order_by="followersCount", descending=True)

            assert [r["username"] for r in asc] == ["low", "high", "none"]
            assert [r["username"] for r in desc] == ["high", "low", "none"]

    def test_invalid_operator_rejected(self):
        with pytest.raises(ValueError):
            Filter("category", "LIKE", "Design")


class TestSQLiteStore:
    """SQLite specifics."""

    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        path = str(tmp_path / "persist.db")
        async with SQLiteStore(path) as store:
            doc_id = await store.insert("profiles", {"username": "jane"})

        async with SQLiteStore(path) as store:
            doc = await store.get("profiles", doc_id)
            assert doc["username"] == "jane"

    @pytest.mark.asyncio
    async def test_rejects_unsafe_field_names(self, tmp_path):
        async with SQLiteStore(str(tmp_path / "x.db")) as store:
            with pytest.raises(ValueError):
                await store.query("profiles", [Filter("a') OR 1=1 --", "==", "x")])


class TestCreateStore:
    """Test backend selection."""

    def test_sqlite_backend(self, tmp_path):
        config = DirectoryConfig(store_backend=StoreBackend.SQLITE, sqlite_path=str(tmp_path / "a.db"))
        assert isinstance(create_store(config), SQLiteStore)

    def test_memory_backend(self):
        config = DirectoryConfig(store_backend=StoreBackend.MEMORY)
        assert isinstance(create_store(config), MemoryStore)

    def test_unknown_backend(self):
        with pytest.raises(ConfigError):
            create_store(SimpleNamespace(store_backend="mongo"))


class TestRedisStore:
    """Redis specifics against a mocked client, no server needed."""

    @pytest.fixture
    def redis_store(self):
        store = RedisStore("redis://localhost:6379/0", key_prefix="test:")
        store._client = MagicMock()
        return store

    @pytest.mark.asyncio
    async def test_get_decodes_document(self, redis_store):
        redis_store._client.get = AsyncMock(return_value='{"username": "jane"}')
        doc = await redis_store.get("profiles", "abc")

        assert doc == {"username": "jane", "id": "abc"}
        redis_store._client.get.assert_awaited_once_with("test:profiles:abc")

    @pytest.mark.asyncio
    async def test_query_skips_vanished_keys(self, redis_store):
        redis_store._client.smembers = AsyncMock(return_value={"b", "a"})
        redis_store._client.mget = AsyncMock(return_value=['{"category": "AI"}', None])

        results = await redis_store.query("profiles", [Filter("category", "==", "AI")])
        assert results == [{"category": "AI", "id": "a"}]

    @pytest.mark.asyncio
    async def test_errors_become_store_errors(self, redis_store):
        redis_store._client.get = AsyncMock(side_effect=RedisConnectionError("refused"))
        with pytest.raises(StoreError):
            await redis_store.get("profiles", "abc")

    @pytest.mark.asyncio
    async def test_ping_unreachable(self, redis_store):
        redis_store._client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))
        assert await redis_store.ping() is False

    def test_redis_backend_selected(self):
        config = DirectoryConfig(store_backend=StoreBackend.REDIS, redis_key_prefix="x:")
        store = create_store(config)
        assert isinstance(store, RedisStore)
