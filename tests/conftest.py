"""Shared fixtures - in-memory and temporary SQLite stores, profile factories."""

from datetime import datetime, timedelta, timezone

import pytest

from xlist.models.profile import Profile
from xlist.store.memory_store import MemoryStore

# Fixed reference clock for analytics and ordering tests
NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_profile():
    """Factory building Profile models without touching a store."""

    def _make(
        profile_id: str,
        username: str = "Jane Doe",
        x_handle: str = "@janedoe",
        category: str = "Design",
        followers_count: int | None = None,
        created_at: datetime | None = None,
        **extra,
    ) -> Profile:
        return Profile(
            id=profile_id,
            x_handle=x_handle,
            username=username,
            category=category,
            followers_count=followers_count,
            user_id=extra.pop("user_id", f"user-{profile_id}"),
            created_at=created_at or NOW,
            **extra,
        )

    return _make


@pytest.fixture
def seed_profile(memory_store):
    """Insert a profile document directly, with a chosen createdAt."""

    async def _seed(
        username: str,
        category: str = "Design",
        followers_count: int | None = None,
        created_at: datetime | None = None,
        user_id: str | None = None,
        **extra,
    ) -> str:
        document = {
            "xHandle": f"@{username.lower().replace(' ', '')}",
            "username": username,
            "category": category,
            "userId": user_id or f"user-{username.lower()}",
            "createdAt": created_at or NOW - timedelta(days=1),
            **extra,
        }
        if followers_count is not None:
            document["followersCount"] = followers_count
        return await memory_store.insert("profiles", document)

    return _seed
