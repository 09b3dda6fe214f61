"""Directory view model - search over an already fetched profile list."""

import re
from dataclasses import dataclass, field, replace
from typing import Sequence

from xlist.models.profile import Profile

X_PROFILE_URL = "https://x.com/{handle}"

_URL_PREFIX_RE = re.compile(r"^(?:https?://)?(?:www\.)?(?:x|twitter)\.com/", re.IGNORECASE)


def _matches(profile: Profile, needle: str) -> bool:
    haystacks = (
        profile.username,
        profile.x_handle,
        profile.category,
        profile.bio,
        profile.location,
    )
    return any(h and needle in h.lower() for h in haystacks)


def search_profiles(profiles: Sequence[Profile], query: str) -> list[Profile]:
    """
    Filter profiles by a case-insensitive substring query.

    Matches username, handle, category, bio and location. Website and
    follower count are not searched. Input order is kept; a blank query
    returns the input unchanged.
    """
    needle = query.strip().lower() if query else ""
    if not needle:
        return list(profiles)
    return [p for p in profiles if _matches(p, needle)]


def clean_handle(x_handle: str) -> str:
    """
    Bare handle from a stored handle or pasted profile URL.

    Examples:
        "@johndoe" -> "johndoe"
        "https://x.com/johndoe" -> "johndoe"
        "@https://x.com/johndoe" -> "johndoe"
    """
    handle = _URL_PREFIX_RE.sub("", x_handle.strip().lstrip("@"))
    return handle.lstrip("@").strip("/")


def external_url(x_handle: str) -> str:
    """X profile URL for a handle."""
    return X_PROFILE_URL.format(handle=clean_handle(x_handle))


@dataclass(frozen=True)
class DirectoryView:
    """Profile list plus search query; ``visible`` is derived from both."""

    profiles: tuple[Profile, ...] = field(default_factory=tuple)
    query: str = ""

    @property
    def visible(self) -> list[Profile]:
        return search_profiles(self.profiles, self.query)

    def with_query(self, query: str) -> "DirectoryView":
        return replace(self, query=query)

    def with_profiles(self, profiles: Sequence[Profile]) -> "DirectoryView":
        return replace(self, profiles=tuple(profiles))
