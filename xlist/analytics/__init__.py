"""Click analytics."""

from xlist.analytics.aggregator import compute_analytics, daily_histogram
from xlist.analytics.service import AnalyticsService, resolve_timezone

__all__ = ["compute_analytics", "daily_histogram", "AnalyticsService", "resolve_timezone"]
