"""Analytics read path: fetch raw events, aggregate on every call."""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from xlist.analytics.aggregator import compute_analytics
from xlist.logging import get_logger
from xlist.models.analytics import AnalyticsData
from xlist.repositories.clicks import ClickRepository
from xlist.store.base import utcnow


def resolve_timezone(name: str) -> tzinfo:
    """Map a timezone name to a tzinfo, "UTC" without needing tzdata."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


class AnalyticsService:
    """Builds AnalyticsData for a profile from its click events."""

    def __init__(self, clicks: ClickRepository, tz: tzinfo = timezone.utc):
        """
        Args:
            clicks: Click event source
            tz: Timezone calendar days are counted in
        """
        self.clicks = clicks
        self.tz = tz
        self._log = get_logger("analytics")

    async def get_analytics(self, profile_id: str, now: datetime | None = None) -> AnalyticsData:
        """
        Aggregate a profile's clicks as of ``now`` (store clock if None).

        Raises:
            ReadError: Click query failed
        """
        now = now or utcnow()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(self.tz)
        events = await self.clicks.query_clicks(profile_id)
        analytics = compute_analytics(events, now)

        self._log.info(
            "analytics_computed",
            profile_id=profile_id,
            total_clicks=analytics.total_clicks,
            events_scanned=len(events),
        )
        return analytics
