"""Export utilities for profiles and analytics."""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, TypeAdapter

from xlist.models.analytics import AnalyticsData
from xlist.models.profile import Profile

if TYPE_CHECKING:
    import pandas as pd

try:
    import pandas as pd
    PANDAS_AVAILABLE = True
except ImportError:
    PANDAS_AVAILABLE = False

_PROFILE_LIST = TypeAdapter(list[Profile])


def to_json(model: BaseModel, indent: int = 2) -> str:
    """
    Convert a model to a JSON string using wire (camelCase) names.

    Args:
        model: Profile, AnalyticsData or any other xlist model
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return model.model_dump_json(indent=indent, by_alias=True, exclude_none=True)


def to_dict(model: BaseModel) -> dict:
    """
    Convert a model to a JSON-compatible dictionary with wire names.

    Args:
        model: Model to convert

    Returns:
        Dictionary representation
    """
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def merge_profiles(profiles: list[Profile]) -> dict:
    """
    Wrap a profile list into a single export-friendly dict.

    Args:
        profiles: Profiles in directory order

    Returns:
        Dict with 'profiles' array plus metadata
    """
    return {
        "exported_at": datetime.now().isoformat(),
        "profiles_count": len(profiles),
        "profiles": [to_dict(p) for p in profiles],
    }


def save_json(
    profiles: list[Profile],
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save profiles to a JSON file.

    Args:
        profiles: Profiles to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(merge_profiles(profiles), indent=indent), encoding="utf-8")
    return path


def load_profiles_json(filepath: str | Path) -> list[Profile]:
    """
    Load profiles written by save_json.

    Args:
        filepath: Path to JSON file

    Returns:
        Profiles in file order
    """
    path = Path(filepath)
    data = json.loads(path.read_text(encoding="utf-8"))
    return _PROFILE_LIST.validate_python(data["profiles"])


def _check_pandas():
    """Raise ImportError if pandas is not available."""
    if not PANDAS_AVAILABLE:
        raise ImportError(
            "pandas is required for DataFrame export. Install with: pip install pandas"
        )


def profiles_to_df(profiles: list[Profile]) -> "pd.DataFrame":
    """
    Convert profiles to a pandas DataFrame, one row per profile.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()
    return pd.DataFrame([p.model_dump(mode="json") for p in profiles])


def daily_clicks_to_df(analytics: AnalyticsData) -> "pd.DataFrame":
    """
    Convert the daily click histogram to a DataFrame with 'date' and 'clicks'.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()
    return pd.DataFrame(
        [{"date": d.date.isoformat(), "clicks": d.clicks} for d in analytics.daily_clicks],
        columns=["date", "clicks"],
    )


def save_csv(profiles: list[Profile], filepath: str | Path) -> Path:
    """
    Save profiles to a CSV file.

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    profiles_to_df(profiles).to_csv(path, index=False)
    return path
