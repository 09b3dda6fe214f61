"""Shared plumbing for store-backed repositories."""

import asyncio
from typing import Any, Awaitable

from xlist.exceptions import StoreError, XlistError
from xlist.logging import get_logger
from xlist.store.base import DocumentStore


class StoreRepository:
    """Base class running store calls under a deadline with error translation."""

    collection: str = ""

    def __init__(self, store: DocumentStore, timeout_seconds: float = 10.0):
        """
        Args:
            store: Backend holding the collection
            timeout_seconds: Deadline per store call, 0 disables it
        """
        self.store = store
        self.timeout_seconds = timeout_seconds
        self._log = get_logger(type(self).__name__)

    async def _run(
        self,
        call: Awaitable[Any],
        error_cls: type[XlistError],
        event: str,
        **context: Any,
    ) -> Any:
        """
        Await a store call, translating backend failures and timeouts.

        Args:
            call: Store coroutine
            error_cls: ReadError or WriteError
            event: Log event name used on failure
            **context: Extra log context

        Raises:
            error_cls: If the store fails or the deadline passes
        """
        try:
            if self.timeout_seconds > 0:
                return await asyncio.wait_for(call, timeout=self.timeout_seconds)
            return await call
        except asyncio.TimeoutError as e:
            self._log.error(event, error="timeout", timeout_seconds=self.timeout_seconds, **context)
            raise error_cls(
                f"{self.collection} store call timed out after {self.timeout_seconds}s"
            ) from e
        except StoreError as e:
            self._log.error(event, error=str(e), **context)
            raise error_cls(f"{self.collection} store call failed: {e}") from e
