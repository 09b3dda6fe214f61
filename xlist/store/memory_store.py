"""In-memory document store for tests and ephemeral runs."""

import copy
import uuid
from typing import Iterable

from xlist.store.base import DocumentStore, Filter, apply_query, encode_document


class MemoryStore(DocumentStore):
    """
    Dict-backed store, nothing survives close().

    Example:
        async with MemoryStore() as store:
            doc_id = await store.insert("profiles", {"username": "jane"})
            doc = await store.get("profiles", doc_id)
    """

    def __init__(self):
        self._collections: dict[str, dict[str, dict]] = {}

    def _collection(self, name: str) -> dict[str, dict]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _with_id(doc_id: str, body: dict) -> dict:
        document = copy.deepcopy(body)
        document["id"] = doc_id
        return document

    async def insert(self, collection: str, data: dict) -> str:
        doc_id = uuid.uuid4().hex
        body = encode_document({k: v for k, v in data.items() if k != "id"})
        self._collection(collection)[doc_id] = copy.deepcopy(body)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict | None:
        body = self._collection(collection).get(doc_id)
        if body is None:
            return None
        return self._with_id(doc_id, body)

    async def update(
        self,
        collection: str,
        doc_id: str,
        set_fields: dict,
        unset_fields: Iterable[str] = (),
    ) -> bool:
        body = self._collection(collection).get(doc_id)
        if body is None:
            return False
        body.update(copy.deepcopy(encode_document(set_fields)))
        for field in unset_fields:
            body.pop(field, None)
        return True

    async def delete(self, collection: str, doc_id: str) -> bool:
        return self._collection(collection).pop(doc_id, None) is not None

    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        documents = [
            self._with_id(doc_id, body)
            for doc_id, body in self._collection(collection).items()
        ]
        return apply_query(documents, filters, order_by, descending)

    async def clear(self, collection: str | None = None) -> None:
        if collection is None:
            self._collections.clear()
        else:
            self._collections.pop(collection, None)

    async def close(self) -> None:
        self._collections.clear()
