"""SQLite-based document store implementation."""

import json
import re
import sqlite3
import uuid
from pathlib import Path
from typing import Iterable

import aiosqlite

from xlist.exceptions import StoreError
from xlist.store.base import DocumentStore, Filter, encode_document

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field name: {field}")
    return f"$.{field}"


class SQLiteStore(DocumentStore):
    """SQLite-based local document store using aiosqlite."""

    def __init__(self, db_path: str = ".xlist.db"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def _ensure_db(self) -> aiosqlite.Connection:
        """Ensure database connection and schema exist."""
        if self._db is None:
            try:
                self._db = await aiosqlite.connect(self.db_path)
                await self._db.execute("""
                    CREATE TABLE IF NOT EXISTS documents (
                        collection TEXT NOT NULL,
                        id TEXT NOT NULL,
                        data TEXT NOT NULL,
                        PRIMARY KEY (collection, id)
                    )
                """)
                await self._db.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open SQLite store {self.db_path}: {e}") from e
        return self._db

    @staticmethod
    def _row_to_document(doc_id: str, data: str) -> dict:
        document = json.loads(data)
        document["id"] = doc_id
        return document

    async def insert(self, collection: str, data: dict) -> str:
        """Insert document, returning its generated id."""
        db = await self._ensure_db()
        doc_id = uuid.uuid4().hex
        body = encode_document({k: v for k, v in data.items() if k != "id"})

        try:
            await db.execute(
                "INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)",
                (collection, doc_id, json.dumps(body)),
            )
            await db.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Insert into {collection} failed: {e}") from e
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict | None:
        """Fetch document by id."""
        db = await self._ensure_db()
        try:
            async with db.execute(
                "SELECT data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ) as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Lookup in {collection} failed: {e}") from e

        if row is None:
            return None
        return self._row_to_document(doc_id, row[0])

    async def update(
        self,
        collection: str,
        doc_id: str,
        set_fields: dict,
        unset_fields: Iterable[str] = (),
    ) -> bool:
        """Merge fields into an existing document."""
        document = await self.get(collection, doc_id)
        if document is None:
            return False

        document.pop("id")
        document.update(encode_document(set_fields))
        for field in unset_fields:
            document.pop(field, None)

        db = await self._ensure_db()
        try:
            await db.execute(
                "UPDATE documents SET data = ? WHERE collection = ? AND id = ?",
                (json.dumps(document), collection, doc_id),
            )
            await db.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Update in {collection} failed: {e}") from e
        return True

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Remove document by id."""
        db = await self._ensure_db()
        try:
            cursor = await db.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            )
            await db.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Delete from {collection} failed: {e}") from e
        return cursor.rowcount > 0

    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """Query documents, pushing filters and ordering down to SQL."""
        db = await self._ensure_db()

        sql = ["SELECT id, data FROM documents WHERE collection = ?"]
        params: list = [collection]
        for f in filters:
            sql.append(f"AND json_extract(data, ?) {f.op} ?")
            params.extend([_json_path(f.field), f.encoded_value])

        if order_by:
            direction = "DESC" if descending else "ASC"
            # Documents missing the field sort last in either direction
            sql.append(
                "ORDER BY json_extract(data, ?) IS NULL, "
                f"json_extract(data, ?) {direction}"
            )
            path = _json_path(order_by)
            params.extend([path, path])

        try:
            async with db.execute(" ".join(sql), params) as cursor:
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Query on {collection} failed: {e}") from e

        return [self._row_to_document(doc_id, data) for doc_id, data in rows]

    async def clear(self, collection: str | None = None) -> None:
        """Remove all documents, optionally limited to one collection."""
        db = await self._ensure_db()
        try:
            if collection is None:
                await db.execute("DELETE FROM documents")
            else:
                await db.execute("DELETE FROM documents WHERE collection = ?", (collection,))
            await db.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Clear failed: {e}") from e

    async def ping(self) -> bool:
        """Check the database can be opened."""
        try:
            await self._ensure_db()
        except StoreError:
            return False
        return True

    async def close(self) -> None:
        """Close database connection."""
        if self._db is not None:
            await self._db.close()
            self._db = None
