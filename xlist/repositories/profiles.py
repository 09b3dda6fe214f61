"""Profile repository - CRUD over the profiles collection."""

from typing import Iterable

from pydantic import ValidationError

from xlist.exceptions import DuplicateProfileError, NotFoundError, ReadError, WriteError
from xlist.models.category import ALL_CATEGORIES
from xlist.models.profile import Profile, ProfileDraft, ProfileUpdate
from xlist.repositories.base import StoreRepository
from xlist.store.base import PROFILES_COLLECTION, DocumentStore, Filter, utcnow


def sort_profiles(profiles: Iterable[Profile]) -> list[Profile]:
    """
    Directory order: followers descending (missing counts as 0), then newest first.
    """
    return sorted(
        profiles,
        key=lambda p: (p.rank_followers, p.created_at),
        reverse=True,
    )


class ProfileRepository(StoreRepository):
    """
    Profile records keyed by store-generated id.

    Example:
        repo = ProfileRepository(store)
        profile_id = await repo.create({"xHandle": "jane", "username": "Jane",
                                        "category": "Design", "userId": "u1"})
        profiles = await repo.list_by_category("Design")
    """

    collection = PROFILES_COLLECTION

    def __init__(
        self,
        store: DocumentStore,
        timeout_seconds: float = 10.0,
        single_profile_per_owner: bool = True,
    ):
        super().__init__(store, timeout_seconds)
        self.single_profile_per_owner = single_profile_per_owner

    def _to_profiles(self, documents: list[dict]) -> list[Profile]:
        try:
            return [Profile.model_validate(doc) for doc in documents]
        except ValidationError as e:
            self._log.error("profile_decode_failed", error=str(e))
            raise ReadError(f"Stored profile is malformed: {e}") from e

    async def create(self, draft: ProfileDraft | dict) -> str:
        """
        Create a profile.

        Args:
            draft: Owner-supplied fields, the handle is normalized to start with @

        Returns:
            New profile id

        Raises:
            pydantic.ValidationError: Required field missing or blank
            DuplicateProfileError: Owner already has a profile
            WriteError: Store rejected the write
        """
        if not isinstance(draft, ProfileDraft):
            draft = ProfileDraft.model_validate(draft)

        if self.single_profile_per_owner:
            existing = await self._run(
                self.store.query(self.collection, [Filter("userId", "==", draft.user_id)]),
                WriteError,
                "profile_create_failed",
                user_id=draft.user_id,
            )
            if existing:
                self._log.warning("profile_duplicate_owner", user_id=draft.user_id)
                raise DuplicateProfileError(f"User {draft.user_id} already has a profile")

        document = draft.to_document()
        document["createdAt"] = utcnow()

        profile_id = await self._run(
            self.store.insert(self.collection, document),
            WriteError,
            "profile_create_failed",
            user_id=draft.user_id,
        )
        self._log.info("profile_created", profile_id=profile_id, x_handle=draft.x_handle)
        return profile_id

    async def list_by_category(self, category: str | None = None) -> list[Profile]:
        """
        List profiles in a category, or all of them for None / "All".

        Sorted after retrieval so no composite index is needed.
        """
        filters = []
        if category and category != ALL_CATEGORIES:
            filters.append(Filter("category", "==", category))

        documents = await self._run(
            self.store.query(self.collection, filters),
            ReadError,
            "profile_list_failed",
            category=category,
        )
        return sort_profiles(self._to_profiles(documents))

    async def list_by_owner(self, user_id: str) -> list[Profile]:
        """List an owner's profiles, newest first."""
        documents = await self._run(
            self.store.query(
                self.collection,
                [Filter("userId", "==", user_id)],
                order_by="createdAt",
                descending=True,
            ),
            ReadError,
            "profile_owner_list_failed",
            user_id=user_id,
        )
        return self._to_profiles(documents)

    async def get_by_owner(self, user_id: str) -> Profile | None:
        """Owner's profile, or None if they have not published one."""
        profiles = await self.list_by_owner(user_id)
        return profiles[0] if profiles else None

    async def get(self, profile_id: str) -> Profile:
        """
        Fetch one profile.

        Raises:
            NotFoundError: No profile with this id
            ReadError: Store lookup failed
        """
        document = await self._run(
            self.store.get(self.collection, profile_id),
            ReadError,
            "profile_get_failed",
            profile_id=profile_id,
        )
        if document is None:
            raise NotFoundError(f"Profile {profile_id} not found")
        return self._to_profiles([document])[0]

    async def update(self, profile_id: str, fields: ProfileUpdate | dict) -> str:
        """
        Merge supplied fields into a profile; absent fields are left untouched.

        Raises:
            pydantic.ValidationError: Unknown or immutable field supplied
            NotFoundError: No profile with this id
            WriteError: Store rejected the write
        """
        if not isinstance(fields, ProfileUpdate):
            fields = ProfileUpdate.model_validate(fields)
        set_fields, unset_fields = fields.changes()

        updated = await self._run(
            self.store.update(self.collection, profile_id, set_fields, unset_fields),
            WriteError,
            "profile_update_failed",
            profile_id=profile_id,
        )
        if not updated:
            self._log.warning("profile_update_missing", profile_id=profile_id)
            raise NotFoundError(f"Profile {profile_id} not found")

        self._log.info(
            "profile_updated",
            profile_id=profile_id,
            fields=sorted(set_fields),
            cleared=unset_fields,
        )
        return profile_id

    async def delete(self, profile_id: str) -> str:
        """
        Delete a profile. Its click events are left in place.

        Raises:
            NotFoundError: No profile with this id
            WriteError: Store rejected the delete
        """
        deleted = await self._run(
            self.store.delete(self.collection, profile_id),
            WriteError,
            "profile_delete_failed",
            profile_id=profile_id,
        )
        if not deleted:
            self._log.warning("profile_delete_missing", profile_id=profile_id)
            raise NotFoundError(f"Profile {profile_id} not found")

        self._log.info("profile_deleted", profile_id=profile_id)
        return profile_id
