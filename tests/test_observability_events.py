"""Tests for logging event sink and logging configuration."""

from __future__ import annotations

import json
import logging

import pytest

from cluster_dashboard.observability import JSONFormatter, LoggingEventSink, observability_configure_logging


def test_observability_event_sink_logs_request_lifecycle(caplog: pytest.LogCaptureFixture) -> None:
    """Log request start, success and failure on the sink logger.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate emitted records.

    Raises:
        AssertionError: Raised when records are missing or misleveled.
    """

    logger = logging.getLogger("tests.events")
    logger.propagate = True
    sink = LoggingEventSink(logger)

    with caplog.at_level(logging.DEBUG, logger="tests.events"):
        sink.request_started("/health")
        sink.request_finished("/health")
        sink.request_finished("/health-dashboard", error="RuntimeError: boom")
        sink.info("Http listener started")

    records = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert records == [
        (logging.INFO, "Dashboard request started: path=/health"),
        (logging.INFO, "Dashboard request handled: path=/health"),
        (logging.ERROR, "Dashboard request failed: path=/health-dashboard error=RuntimeError: boom"),
        (logging.INFO, "Http listener started"),
    ]


def test_observability_configure_logging_installs_single_handler() -> None:
    """Install exactly one handler on repeated configuration."""

    observability_configure_logging(level="DEBUG")
    root = observability_configure_logging(level="WARNING", json_format=True)

    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert root.level == logging.WARNING
    assert root.propagate is False


def test_observability_json_formatter_emits_one_object() -> None:
    """Format one record as a JSON object."""

    record = logging.LogRecord("cluster_dashboard.events", logging.INFO, __file__, 1, "hello %s", ("world",), None)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "cluster_dashboard.events"
