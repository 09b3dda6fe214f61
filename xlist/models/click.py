"""Click event data model."""

from pydantic import BaseModel, ConfigDict, Field

from xlist.models.timestamps import UtcDatetime


class ClickEvent(BaseModel):
    """One activation of a profile's external link."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    profile_id: str = Field(alias="profileId")
    clicked_at: UtcDatetime = Field(alias="clickedAt")
    user_agent: str | None = Field(default=None, alias="userAgent")
    ip_address: str | None = Field(default=None, alias="ipAddress")
