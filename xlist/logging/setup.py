"""Structlog configuration for xlist."""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

from xlist.config import DirectoryConfig, LogFormat

# Chatty at DEBUG/INFO, only their warnings are kept
_QUIET_LOGGERS = ("aiosqlite", "asyncio", "httpx")


def _renderers(log_format: LogFormat) -> list:
    if log_format == LogFormat.JSON:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.set_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    ]


def configure_logging(config: DirectoryConfig | None = None) -> None:
    """
    Configure structlog and stdlib logging for the directory.

    Safe to call more than once; the last call wins, so each Directory
    (and each CLI command) can pick its own level and format.

    Args:
        config: DirectoryConfig instance, uses defaults if None
    """
    config = config or DirectoryConfig()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderers(config.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger bound to ``logger_name`` when a name is given."""
    logger = structlog.get_logger()
    return logger.bind(logger_name=name) if name else logger


@contextmanager
def log_context(**values) -> Iterator[None]:
    """
    Attach key/value pairs to every log event emitted inside the block.

    Example:
        with log_context(request_id="abc", path="/api/profiles"):
            await directory.browse()
    """
    structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*values)
