"""Click analytics result models."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class DailyClicks(BaseModel):
    """Click count for one calendar day."""

    date: dt.date
    clicks: int = 0


class AnalyticsData(BaseModel):
    """Summary statistics for one profile's click history."""

    model_config = ConfigDict(populate_by_name=True)

    total_clicks: int = Field(alias="totalClicks")
    today_clicks: int = Field(alias="todayClicks")
    weekly_clicks: int = Field(alias="weeklyClicks")
    monthly_clicks: int = Field(alias="monthlyClicks")
    daily_clicks: list[DailyClicks] = Field(alias="dailyClicks")
