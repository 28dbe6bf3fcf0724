"""Unit tests for structlog setup and request log context."""

import json
import logging

import pytest
import structlog

from lyntfeed.config import FeedConfig, LogFormat
from lyntfeed.logging import (
    bind_log_context,
    bind_request_context,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def clean_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


class TestLogContext:
    """Test request-scoped context binding."""

    def test_request_context_replaces_previous(self):
        bind_request_context(request_id="first", path="/a")
        bind_log_context(user_id="user-1")
        bind_request_context(request_id="second", path="/b")

        assert structlog.contextvars.get_contextvars() == {
            "request_id": "second",
            "path": "/b",
        }

    def test_log_context_adds_fields(self):
        bind_request_context(request_id="r1")
        bind_log_context(user_id="user-1")

        assert structlog.contextvars.get_contextvars() == {
            "request_id": "r1",
            "user_id": "user-1",
        }


class TestConfigureLogging:
    """Test rendered output."""

    def test_json_events_carry_context(self, capsys):
        configure_logging(FeedConfig(log_format=LogFormat.JSON))
        bind_request_context(request_id="r1", path="/api/lynt")
        bind_log_context(user_id="user-1")

        get_logger("test").info("item_created", item_id="42")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "item_created"
        assert event["logger_name"] == "test"
        assert event["request_id"] == "r1"
        assert event["user_id"] == "user-1"
        assert event["item_id"] == "42"
        assert event["level"] == "info"

    def test_level_filters_events(self, capsys):
        configure_logging(FeedConfig(log_format=LogFormat.JSON, log_level="WARNING"))

        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_chatty_libraries_quieted(self):
        configure_logging(FeedConfig(log_level="DEBUG"))
        assert logging.getLogger("aiosqlite").level == logging.WARNING
