"""Document store implementations."""

from xlist.config import DirectoryConfig, StoreBackend
from xlist.exceptions import ConfigError
from xlist.store.base import (
    CLICKS_COLLECTION,
    PROFILES_COLLECTION,
    DocumentStore,
    Filter,
    utcnow,
)
from xlist.store.memory_store import MemoryStore
from xlist.store.redis_store import RedisStore
from xlist.store.sqlite_store import SQLiteStore


def create_store(config: DirectoryConfig) -> DocumentStore:
    """Build the store backend selected by config."""
    if config.store_backend == StoreBackend.SQLITE:
        return SQLiteStore(config.sqlite_path)
    if config.store_backend == StoreBackend.REDIS:
        return RedisStore(config.redis_url, config.redis_key_prefix)
    if config.store_backend == StoreBackend.MEMORY:
        return MemoryStore()
    raise ConfigError(f"Unknown store backend: {config.store_backend}")


__all__ = [
    "DocumentStore",
    "SQLiteStore",
    "RedisStore",
    "MemoryStore",
    "Filter",
    "create_store",
    "utcnow",
    "PROFILES_COLLECTION",
    "CLICKS_COLLECTION",
]
