"""Directory facade - wires config, logging, store and repositories."""

import asyncio
from dataclasses import dataclass, field

from xlist.analytics.service import AnalyticsService, resolve_timezone
from xlist.config import DirectoryConfig
from xlist.directory.view import external_url, search_profiles
from xlist.logging import configure_logging, get_logger
from xlist.models.analytics import AnalyticsData
from xlist.models.profile import Profile, ProfileUpdate
from xlist.repositories.clicks import ClickRepository
from xlist.repositories.profiles import ProfileRepository
from xlist.store import DocumentStore, create_store


@dataclass
class HomeData:
    """Directory listing plus the signed-in owner's own profile."""

    profiles: list[Profile] = field(default_factory=list)
    own_profile: Profile | None = None


class Directory:
    """
    High-level directory interface.

    Example:
        async with Directory() as directory:
            profiles = await directory.browse("Design", query="berlin")
            url = directory.open_profile(profiles[0])
    """

    def __init__(self, config: DirectoryConfig | None = None, store: DocumentStore | None = None):
        """
        Initialize directory with optional configuration.

        Args:
            config: DirectoryConfig instance, uses defaults if None
            store: Store to use instead of the one selected by config
        """
        self.config = config or DirectoryConfig()
        self._store = store
        self._pending_clicks: set[asyncio.Task] = set()
        self._log = get_logger("directory")
        self.profiles: ProfileRepository | None = None
        self.clicks: ClickRepository | None = None
        self.analytics: AnalyticsService | None = None

    @property
    def store(self) -> DocumentStore | None:
        return self._store

    async def __aenter__(self) -> "Directory":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)

        if self._store is None:
            self._store = create_store(self.config)

        timeout = self.config.store_timeout_seconds
        self.profiles = ProfileRepository(
            self._store,
            timeout,
            single_profile_per_owner=self.config.single_profile_per_owner,
        )
        self.clicks = ClickRepository(self._store, timeout)
        self.analytics = AnalyticsService(
            self.clicks, resolve_timezone(self.config.analytics_timezone)
        )

        self._log.info("directory_open", backend=self.config.store_backend.value)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - drain click writes, close the store."""
        await self.drain_clicks()
        if self._store:
            await self._store.close()

    async def browse(self, category: str | None = None, query: str = "") -> list[Profile]:
        """
        Profiles in a category (or all), filtered by a search query.

        Raises:
            ReadError: Listing failed
        """
        profiles = await self.profiles.list_by_category(category)
        visible = search_profiles(profiles, query)
        self._log.info(
            "directory_browse",
            category=category,
            query=query,
            total=len(profiles),
            visible=len(visible),
        )
        return visible

    async def load_home(
        self,
        user_id: str | None = None,
        category: str | None = None,
    ) -> HomeData:
        """
        Fetch the listing and the owner's profile concurrently.

        Raises:
            ReadError: Either fetch failed
        """
        if user_id is None:
            return HomeData(profiles=await self.profiles.list_by_category(category))

        profiles, own_profile = await asyncio.gather(
            self.profiles.list_by_category(category),
            self.profiles.get_by_owner(user_id),
        )
        return HomeData(profiles=profiles, own_profile=own_profile)

    async def save_profile(self, user_id: str, fields: dict) -> str:
        """
        Create the owner's profile, or update it if one exists.

        Args:
            user_id: Owning account
            fields: Profile fields (wire or Python names)

        Returns:
            Profile id
        """
        existing = await self.profiles.get_by_owner(user_id)
        if existing is None:
            return await self.profiles.create({**fields, "userId": user_id})

        changes = {k: v for k, v in fields.items() if k not in ("userId", "user_id")}
        return await self.profiles.update(existing.id, ProfileUpdate.model_validate(changes))

    async def get_analytics(self, profile_id: str) -> AnalyticsData:
        """Click analytics for a profile as of now."""
        return await self.analytics.get_analytics(profile_id)

    def open_profile(
        self,
        profile: Profile,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> str:
        """
        Record a click in the background and return the X profile URL.

        The URL is returned immediately; the click write is neither awaited
        nor able to cancel the navigation. Recording failures are only logged.
        """
        task = asyncio.create_task(
            self.clicks.record_click(profile.id, user_agent, ip_address)
        )
        self._pending_clicks.add(task)
        task.add_done_callback(self._click_done)
        return external_url(profile.x_handle)

    def _click_done(self, task: asyncio.Task) -> None:
        self._pending_clicks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("click_task_failed", error=repr(exc))

    async def drain_clicks(self) -> None:
        """Wait for background click writes still in flight."""
        if self._pending_clicks:
            await asyncio.gather(*self._pending_clicks, return_exceptions=True)
