"""Abstract document store interface."""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

PROFILES_COLLECTION = "profiles"
CLICKS_COLLECTION = "profileClicks"

_OPERATORS = {
    "==": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def utcnow() -> datetime:
    """Store clock."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Encode a datetime as a fixed-width UTC ISO-8601 string.

    String order of encoded values equals time order, so range filters and
    ordering work the same on every backend. Naive datetimes are taken as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


def encode_document(data: dict) -> dict:
    """Encode a document for storage."""
    return {key: encode_value(value) for key, value in data.items()}


@dataclass(frozen=True)
class Filter:
    """Single field predicate, e.g. Filter("category", "==", "Design")."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    @property
    def encoded_value(self) -> Any:
        return encode_value(self.value)

    def matches(self, document: dict) -> bool:
        """Evaluate against an encoded document; a missing field never matches."""
        if self.field not in document:
            return False
        try:
            return _OPERATORS[self.op](document[self.field], self.encoded_value)
        except TypeError:
            return False


def apply_query(
    documents: Iterable[dict],
    filters: Iterable[Filter] = (),
    order_by: str | None = None,
    descending: bool = False,
) -> list[dict]:
    """Filter and order documents client-side."""
    filters = list(filters)
    results = [doc for doc in documents if all(f.matches(doc) for f in filters)]
    if order_by:
        # Documents missing the field sort last in either direction
        present = [doc for doc in results if doc.get(order_by) is not None]
        missing = [doc for doc in results if doc.get(order_by) is None]
        present.sort(key=lambda doc: doc[order_by], reverse=descending)
        results = present + missing
    return results


class DocumentStore(ABC):
    """Abstract base class for document store implementations."""

    @abstractmethod
    async def insert(self, collection: str, data: dict) -> str:
        """
        Insert a document with a generated id.

        Args:
            collection: Collection name
            data: Document body (without id)

        Returns:
            Generated document id
        """
        ...

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict | None:
        """
        Point lookup by id.

        Returns:
            Document including its "id" key, or None if missing
        """
        ...

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        set_fields: dict,
        unset_fields: Iterable[str] = (),
    ) -> bool:
        """
        Merge fields into an existing document.

        Args:
            collection: Collection name
            doc_id: Document id
            set_fields: Fields to write
            unset_fields: Field names to remove

        Returns:
            False if the document does not exist
        """
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        """
        Remove a document.

        Returns:
            False if the document does not exist
        """
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """
        Query documents matching every filter.

        Args:
            collection: Collection name
            filters: Predicates, AND-ed together
            order_by: Optional field to order by
            descending: Reverse the ordering

        Returns:
            Matching documents including their "id" keys
        """
        ...

    @abstractmethod
    async def clear(self, collection: str | None = None) -> None:
        """Remove every document, or every document in one collection."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def ping(self) -> bool:
        """Check if the backend is reachable."""
        return True

    async def __aenter__(self) -> "DocumentStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
