"""xlist - directory of X profiles with click analytics."""

from xlist.analytics import AnalyticsService, compute_analytics
from xlist.config import DirectoryConfig
from xlist.core.directory import Directory, HomeData
from xlist.core.exporter import load_profiles_json, save_json, to_dict, to_json
from xlist.directory.view import DirectoryView, external_url, search_profiles
from xlist.models.analytics import AnalyticsData, DailyClicks
from xlist.models.category import ALL_CATEGORIES, CATEGORIES
from xlist.models.click import ClickEvent
from xlist.models.profile import Profile, ProfileDraft, ProfileUpdate
from xlist.repositories import ClickRepository, ProfileRepository

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "Directory",
    "DirectoryConfig",
    "HomeData",
    # Repositories and analytics
    "ProfileRepository",
    "ClickRepository",
    "AnalyticsService",
    "compute_analytics",
    # View model
    "DirectoryView",
    "search_profiles",
    "external_url",
    # Models
    "Profile",
    "ProfileDraft",
    "ProfileUpdate",
    "ClickEvent",
    "AnalyticsData",
    "DailyClicks",
    "CATEGORIES",
    "ALL_CATEGORIES",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_profiles_json",
    "__version__",
]
