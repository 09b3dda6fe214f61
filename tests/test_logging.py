"""Tests for structlog setup."""

import json

import structlog

from xlist.config import DirectoryConfig, LogFormat
from xlist.logging import configure_logging, get_logger, log_context


def last_json_line(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


class TestConfigureLogging:
    """Test output format and level filtering."""

    def test_json_events(self, capsys):
        configure_logging(DirectoryConfig(log_format=LogFormat.JSON))
        get_logger("profiles").info("profile_created", profile_id="p1")

        event = last_json_line(capsys.readouterr().out)
        assert event["event"] == "profile_created"
        assert event["profile_id"] == "p1"
        assert event["logger_name"] == "profiles"
        assert event["level"] == "info"

    def test_level_filters(self, capsys):
        configure_logging(DirectoryConfig(log_format=LogFormat.JSON, log_level="WARNING"))
        log = get_logger("clicks")
        log.info("click_recorded")
        log.warning("click_record_failed")

        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["click_record_failed"]

    def test_reconfigure_changes_level(self, capsys):
        configure_logging(DirectoryConfig(log_format=LogFormat.JSON, log_level="ERROR"))
        configure_logging(DirectoryConfig(log_format=LogFormat.JSON, log_level="DEBUG"))
        get_logger().debug("store_ready")

        assert last_json_line(capsys.readouterr().out)["event"] == "store_ready"


class TestLogContext:
    """Test contextvar binding."""

    def test_binds_and_unbinds(self):
        with log_context(request_id="r1"):
            assert structlog.contextvars.get_contextvars()["request_id"] == "r1"
        assert "request_id" not in structlog.contextvars.get_contextvars()

    def test_context_in_events(self, capsys):
        configure_logging(DirectoryConfig(log_format=LogFormat.JSON))
        with log_context(path="/api/profiles"):
            get_logger().info("directory_browse")

        assert last_json_line(capsys.readouterr().out)["path"] == "/api/profiles"
