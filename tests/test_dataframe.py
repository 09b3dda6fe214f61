"""Unit tests for DataFrame export utilities - built models, no store."""

from datetime import timedelta

import pytest

from xlist.analytics import compute_analytics
from xlist.core.exporter import daily_clicks_to_df, profiles_to_df, save_csv
from xlist.models.click import ClickEvent

# Skip all tests if pandas not installed
pd = pytest.importorskip("pandas")


@pytest.fixture
def profiles(make_profile):
    return [
        make_profile("p1", username="Ada", followers_count=10),
        make_profile("p2", username="Grace"),
    ]


class TestProfilesDf:
    """Test profile DataFrame conversion."""

    def test_returns_dataframe(self, profiles):
        assert isinstance(profiles_to_df(profiles), pd.DataFrame)

    def test_one_row_per_profile(self, profiles):
        df = profiles_to_df(profiles)
        assert len(df) == 2
        assert list(df["id"]) == ["p1", "p2"]

    def test_has_profile_columns(self, profiles):
        df = profiles_to_df(profiles)
        for column in ("username", "x_handle", "category", "followers_count", "created_at"):
            assert column in df.columns

    def test_empty(self):
        assert len(profiles_to_df([])) == 0


class TestDailyClicksDf:
    """Test histogram DataFrame conversion."""

    def test_thirty_rows(self, now):
        df = daily_clicks_to_df(compute_analytics([], now))
        assert list(df.columns) == ["date", "clicks"]
        assert len(df) == 30

    def test_counts_land_on_their_day(self, now):
        clicks = [ClickEvent(id="c1", profile_id="p1", clicked_at=now - timedelta(days=1))]
        df = daily_clicks_to_df(compute_analytics(clicks, now))
        yesterday = (now - timedelta(days=1)).date().isoformat()

        assert df.loc[df["date"] == yesterday, "clicks"].item() == 1
        assert df["clicks"].sum() == 1


class TestSaveCsv:
    """Test CSV export."""

    def test_writes_file(self, profiles, tmp_path):
        path = save_csv(profiles, tmp_path / "exports" / "profiles.csv")
        assert path.exists()

        df = pd.read_csv(path)
        assert list(df["username"]) == ["Ada", "Grace"]
