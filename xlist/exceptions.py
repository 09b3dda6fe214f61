"""Custom exception hierarchy for xlist."""


class XlistError(Exception):
    """Base exception for all xlist errors."""


class StoreError(XlistError):
    """Document store backend failed."""


class ReadError(XlistError):
    """Listing or aggregation query failed."""


class WriteError(XlistError):
    """Create, update or delete could not be completed."""


class DuplicateProfileError(WriteError):
    """Owner already has a published profile."""


class NotFoundError(XlistError):
    """Referenced record does not exist."""


class ConfigError(XlistError):
    """Invalid configuration."""
