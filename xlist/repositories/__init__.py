"""Store-backed repositories."""

from xlist.repositories.clicks import ClickRepository
from xlist.repositories.profiles import ProfileRepository, sort_profiles

__all__ = ["ProfileRepository", "ClickRepository", "sort_profiles"]
