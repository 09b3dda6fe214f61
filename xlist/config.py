"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


class StoreBackend(str, Enum):
    """Document store backend type."""
    SQLITE = "sqlite"
    REDIS = "redis"
    MEMORY = "memory"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class DirectoryConfig(BaseSettings):
    """Configuration for the xlist directory."""

    # Store settings
    store_backend: StoreBackend = StoreBackend.SQLITE
    sqlite_path: str = ".xlist.db"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "xlist:"

    # Deadline applied to every store call, 0 disables it
    store_timeout_seconds: float = 10.0

    # Calendar days in analytics are counted in this timezone
    analytics_timezone: str = "UTC"

    # Profiles
    single_profile_per_owner: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "XLIST_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
