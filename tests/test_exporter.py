"""Unit tests for exporter utilities - built models, no store."""

import json
from datetime import timedelta

import pytest

from xlist.analytics import compute_analytics
from xlist.core.exporter import (
    load_profiles_json,
    merge_profiles,
    save_json,
    to_dict,
    to_json,
)


@pytest.fixture
def profiles(make_profile, now):
    return [
        make_profile("p1", username="Ada", x_handle="@ada", followers_count=10, bio="compilers"),
        make_profile("p2", username="Grace", x_handle="@grace", created_at=now - timedelta(days=2)),
    ]


class TestToJson:
    """Test JSON string conversion."""

    def test_to_json_is_valid_json(self, profiles):
        parsed = json.loads(to_json(profiles[0]))
        assert parsed["username"] == "Ada"

    def test_uses_wire_names(self, profiles):
        parsed = json.loads(to_json(profiles[0]))
        assert parsed["xHandle"] == "@ada"
        assert parsed["followersCount"] == 10
        assert "x_handle" not in parsed

    def test_analytics_json(self, now):
        parsed = json.loads(to_json(compute_analytics([], now)))
        assert parsed["totalClicks"] == 0
        assert len(parsed["dailyClicks"]) == 30


class TestToDict:
    """Test dictionary conversion."""

    def test_missing_optionals_omitted(self, profiles):
        d = to_dict(profiles[1])
        assert "bio" not in d
        assert "followersCount" not in d

    def test_timestamps_are_strings(self, profiles):
        assert isinstance(to_dict(profiles[0])["createdAt"], str)


class TestMergeProfiles:
    """Test export wrapper."""

    def test_metadata(self, profiles):
        merged = merge_profiles(profiles)
        assert merged["profiles_count"] == 2
        assert "exported_at" in merged
        assert [p["id"] for p in merged["profiles"]] == ["p1", "p2"]

    def test_empty(self):
        assert merge_profiles([])["profiles"] == []


class TestSaveLoadJson:
    """Test file round trip."""

    def test_save_creates_parent_dirs(self, profiles, tmp_path):
        path = save_json(profiles, tmp_path / "out" / "profiles.json")
        assert path.exists()

    def test_load_restores_profiles(self, profiles, tmp_path):
        path = save_json(profiles, tmp_path / "profiles.json")
        loaded = load_profiles_json(path)

        assert [p.id for p in loaded] == ["p1", "p2"]
        assert loaded[0].x_handle == "@ada"
        assert loaded[1].created_at == profiles[1].created_at
        assert loaded[1].followers_count is None
