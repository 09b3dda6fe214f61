"""Redis document store implementation."""

import json
import uuid
from typing import Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from xlist.exceptions import StoreError
from xlist.store.base import DocumentStore, Filter, apply_query, encode_document


class RedisStore(DocumentStore):
    """
    Redis-based document store.

    Each document is a JSON string under "<prefix><collection>:<id>"; the ids
    of a collection are tracked in the set "<prefix><collection>:ids".
    Filters and ordering are evaluated client-side.

    Example:
        store = RedisStore("redis://localhost:6379/0")
        async with store:
            doc_id = await store.insert("profiles", {"username": "jane"})
    """

    def __init__(self, redis_url: str = "redis://localhost:6379/0", key_prefix: str = "xlist:"):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            key_prefix: Namespace for every key written
        """
        self.redis_url = redis_url
        self._key_prefix = key_prefix
        self._client: Optional[redis.Redis] = None

    async def _ensure_client(self) -> "redis.Redis":
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(self.redis_url, decode_responses=True)
        return self._client

    def _doc_key(self, collection: str, doc_id: str) -> str:
        return f"{self._key_prefix}{collection}:{doc_id}"

    def _ids_key(self, collection: str) -> str:
        return f"{self._key_prefix}{collection}:ids"

    async def insert(self, collection: str, data: dict) -> str:
        client = await self._ensure_client()
        doc_id = uuid.uuid4().hex
        body = encode_document({k: v for k, v in data.items() if k != "id"})

        try:
            pipe = client.pipeline(transaction=True)
            pipe.set(self._doc_key(collection, doc_id), json.dumps(body))
            pipe.sadd(self._ids_key(collection), doc_id)
            await pipe.execute()
        except RedisError as e:
            raise StoreError(f"Insert into {collection} failed: {e}") from e
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict | None:
        client = await self._ensure_client()
        try:
            data = await client.get(self._doc_key(collection, doc_id))
        except RedisError as e:
            raise StoreError(f"Lookup in {collection} failed: {e}") from e

        if data is None:
            return None
        document = json.loads(data)
        document["id"] = doc_id
        return document

    async def update(
        self,
        collection: str,
        doc_id: str,
        set_fields: dict,
        unset_fields: Iterable[str] = (),
    ) -> bool:
        document = await self.get(collection, doc_id)
        if document is None:
            return False

        document.pop("id")
        document.update(encode_document(set_fields))
        for field in unset_fields:
            document.pop(field, None)

        client = await self._ensure_client()
        try:
            # xx: only overwrite a key that still exists
            written = await client.set(
                self._doc_key(collection, doc_id), json.dumps(document), xx=True
            )
        except RedisError as e:
            raise StoreError(f"Update in {collection} failed: {e}") from e
        return bool(written)

    async def delete(self, collection: str, doc_id: str) -> bool:
        client = await self._ensure_client()
        try:
            pipe = client.pipeline(transaction=True)
            pipe.delete(self._doc_key(collection, doc_id))
            pipe.srem(self._ids_key(collection), doc_id)
            deleted, _ = await pipe.execute()
        except RedisError as e:
            raise StoreError(f"Delete from {collection} failed: {e}") from e
        return deleted > 0

    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        client = await self._ensure_client()
        try:
            ids = sorted(await client.smembers(self._ids_key(collection)))
            values = await client.mget([self._doc_key(collection, i) for i in ids]) if ids else []
        except RedisError as e:
            raise StoreError(f"Query on {collection} failed: {e}") from e

        documents = []
        for doc_id, data in zip(ids, values):
            if data is None:
                continue
            document = json.loads(data)
            document["id"] = doc_id
            documents.append(document)

        return apply_query(documents, filters, order_by, descending)

    async def clear(self, collection: str | None = None) -> None:
        client = await self._ensure_client()
        pattern = f"{self._key_prefix}{collection}:*" if collection else f"{self._key_prefix}*"

        try:
            cursor = 0
            while True:
                cursor, keys = await client.scan(cursor, match=pattern)
                if keys:
                    await client.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise StoreError(f"Clear failed: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        """Check if Redis is available."""
        try:
            client = await self._ensure_client()
            return await client.ping()
        except RedisError:
            return False
