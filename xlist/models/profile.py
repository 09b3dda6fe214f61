"""Profile data models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from xlist.models.timestamps import UtcDatetime


def normalize_handle(value: str) -> str:
    """Ensure an X handle carries a leading @."""
    value = value.strip()
    return value if value.startswith("@") else f"@{value}"


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Profile(BaseModel):
    """A published directory profile as stored."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    x_handle: str = Field(alias="xHandle")
    username: str
    category: str
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    followers_count: int | None = Field(default=None, alias="followersCount", ge=0)
    user_id: str = Field(alias="userId")
    created_at: UtcDatetime = Field(alias="createdAt")

    @property
    def rank_followers(self) -> int:
        """Follower count used for ordering, missing counts rank as zero."""
        return self.followers_count or 0


class ProfileDraft(BaseModel):
    """Profile fields supplied by the owner at creation time."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    x_handle: str = Field(alias="xHandle")
    username: str
    category: str
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    followers_count: int | None = Field(default=None, alias="followersCount", ge=0)
    user_id: str = Field(alias="userId")

    @field_validator("x_handle")
    @classmethod
    def _normalize_handle(cls, value: str) -> str:
        return normalize_handle(_require_text(value))

    @field_validator("username", "category", "user_id")
    @classmethod
    def _required(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("bio", "location", "website")
    @classmethod
    def _optional(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    def to_document(self) -> dict:
        """Wire-shaped document with absent optional fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ProfileUpdate(BaseModel):
    """
    Partial profile change.

    Only fields explicitly supplied are written. A supplied blank optional
    field clears it from the stored document. Ownership and creation time
    cannot be changed.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    x_handle: str | None = Field(default=None, alias="xHandle")
    username: str | None = None
    category: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    followers_count: int | None = Field(default=None, alias="followersCount", ge=0)

    @field_validator("x_handle")
    @classmethod
    def _normalize_handle(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_handle(_require_text(value))

    @field_validator("username", "category")
    @classmethod
    def _required(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_text(value)

    @field_validator("bio", "location", "website")
    @classmethod
    def _optional(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def _no_null_required(self) -> "ProfileUpdate":
        for name in ("x_handle", "username", "category"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> tuple[dict, list[str]]:
        """
        Split supplied fields into document writes and removals.

        Returns:
            (fields to set keyed by wire name, wire names to remove)
        """
        set_fields: dict = {}
        unset_fields: list[str] = []
        for name in sorted(self.model_fields_set):
            alias = type(self).model_fields[name].alias or name
            value = getattr(self, name)
            if value is None:
                unset_fields.append(alias)
            else:
                set_fields[alias] = value
        return set_fields, unset_fields
