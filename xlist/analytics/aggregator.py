"""Click analytics aggregation.

Everything here is a pure function of the click events and an explicit
``now``; nothing is persisted, every call recomputes from the raw events.

Calendar boundaries (start of today, first of the month, histogram days) are
taken in ``now``'s timezone. Rolling windows (last week) are plain offsets
from ``now``.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable

from xlist.models.analytics import AnalyticsData, DailyClicks
from xlist.models.click import ClickEvent

HISTOGRAM_DAYS = 30
WEEK = timedelta(days=7)


def _aware(now: datetime) -> datetime:
    # Naive clocks are read as UTC, matching the store encoding
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def start_of_day(now: datetime) -> datetime:
    return _aware(now).replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def daily_histogram(
    clicks: Iterable[ClickEvent],
    now: datetime,
    days: int = HISTOGRAM_DAYS,
) -> list[DailyClicks]:
    """
    Dense per-day click counts ending today.

    Args:
        clicks: Click events, any order
        now: Reference time
        days: Number of calendar days, today included

    Returns:
        Exactly ``days`` entries, oldest first, zero-filled
    """
    now = _aware(now)
    today = now.date()
    counts = Counter(c.clicked_at.astimezone(now.tzinfo).date() for c in clicks)

    return [
        DailyClicks(date=day, clicks=counts.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]


def compute_analytics(clicks: Iterable[ClickEvent], now: datetime) -> AnalyticsData:
    """
    Summarize one profile's click history as of ``now``.

    monthly_clicks is calendar month to date, not a rolling 30 days, while
    the histogram covers the last 30 calendar days.

    Args:
        clicks: Every click event of the profile
        now: Reference time

    Returns:
        AnalyticsData, all zeros for a profile without clicks
    """
    now = _aware(now)
    clicks = list(clicks)

    today = start_of_day(now)
    this_month = start_of_month(now)
    last_week = now - WEEK

    return AnalyticsData(
        total_clicks=len(clicks),
        today_clicks=sum(1 for c in clicks if c.clicked_at >= today),
        weekly_clicks=sum(1 for c in clicks if c.clicked_at >= last_week),
        monthly_clicks=sum(1 for c in clicks if c.clicked_at >= this_month),
        daily_clicks=daily_histogram(clicks, now),
    )
