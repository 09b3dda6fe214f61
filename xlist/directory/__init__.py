"""Directory view model."""

from xlist.directory.view import (
    X_PROFILE_URL,
    DirectoryView,
    clean_handle,
    external_url,
    search_profiles,
)

__all__ = ["DirectoryView", "search_profiles", "clean_handle", "external_url", "X_PROFILE_URL"]
