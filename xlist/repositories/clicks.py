"""Click repository - append-only click events and range reads."""

from datetime import datetime

from pydantic import ValidationError

from xlist.exceptions import ReadError, WriteError
from xlist.models.click import ClickEvent
from xlist.repositories.base import StoreRepository
from xlist.store.base import CLICKS_COLLECTION, Filter, utcnow


class ClickRepository(StoreRepository):
    """Click events for directory profiles. Events are never updated or deleted."""

    collection = CLICKS_COLLECTION

    async def add_click(
        self,
        profile_id: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
        clicked_at: datetime | None = None,
    ) -> str:
        """
        Append one click event.

        Args:
            profile_id: Clicked profile
            user_agent: Optional client user agent
            ip_address: Optional client address
            clicked_at: Event time, defaults to the store clock

        Returns:
            New event id

        Raises:
            WriteError: Store rejected the write
        """
        document: dict = {
            "profileId": profile_id,
            "clickedAt": clicked_at or utcnow(),
        }
        if user_agent:
            document["userAgent"] = user_agent
        if ip_address:
            document["ipAddress"] = ip_address

        click_id = await self._run(
            self.store.insert(self.collection, document),
            WriteError,
            "click_write_failed",
            profile_id=profile_id,
        )
        self._log.debug("click_recorded", profile_id=profile_id, click_id=click_id)
        return click_id

    async def record_click(
        self,
        profile_id: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> str | None:
        """
        Record a click without ever failing the caller.

        Returns:
            New event id, or None if recording failed (the failure is logged)
        """
        try:
            return await self.add_click(profile_id, user_agent, ip_address)
        except WriteError as e:
            self._log.warning("click_record_failed", profile_id=profile_id, error=str(e))
            return None

    async def query_clicks(
        self,
        profile_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ClickEvent]:
        """
        Click events for a profile, newest first.

        Args:
            profile_id: Profile to read
            start: Inclusive lower bound on clicked_at
            end: Inclusive upper bound on clicked_at

        Raises:
            ReadError: Store query failed
        """
        filters = [Filter("profileId", "==", profile_id)]
        if start is not None:
            filters.append(Filter("clickedAt", ">=", start))
        if end is not None:
            filters.append(Filter("clickedAt", "<=", end))

        documents = await self._run(
            self.store.query(self.collection, filters, order_by="clickedAt", descending=True),
            ReadError,
            "click_query_failed",
            profile_id=profile_id,
        )
        try:
            return [ClickEvent.model_validate(doc) for doc in documents]
        except ValidationError as e:
            self._log.error("click_decode_failed", profile_id=profile_id, error=str(e))
            raise ReadError(f"Stored click event is malformed: {e}") from e

    async def count_clicks(
        self,
        profile_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        """Number of click events for a profile in an optional closed range."""
        return len(await self.query_clicks(profile_id, start, end))
