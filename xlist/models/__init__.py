"""Pydantic models for xlist."""

from xlist.models.analytics import AnalyticsData, DailyClicks
from xlist.models.category import ALL_CATEGORIES, CATEGORIES, is_valid_category
from xlist.models.click import ClickEvent
from xlist.models.profile import Profile, ProfileDraft, ProfileUpdate, normalize_handle

__all__ = [
    "Profile",
    "ProfileDraft",
    "ProfileUpdate",
    "ClickEvent",
    "AnalyticsData",
    "DailyClicks",
    "CATEGORIES",
    "ALL_CATEGORIES",
    "is_valid_category",
    "normalize_handle",
]
