"""Event sink implementation backed by stdlib logging."""

from __future__ import annotations

import logging

from .interfaces import EventSinkPort


class LoggingEventSink(EventSinkPort):
    """Write dashboard events as log records on a dedicated logger."""

    def __init__(self, logger: logging.Logger | None = None):
        """Initialize event sink.

        Args:
            logger: Optional target logger, defaults to `cluster_dashboard.events`.

        Returns:
            None: Initializer does not return a value.
        """

        self._logger = logger or logging.getLogger("cluster_dashboard.events")

    def info(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def request_started(self, path: str) -> None:
        self._logger.info("Dashboard request started: path=%s", path)

    def request_finished(self, path: str, error: str | None = None) -> None:
        if error is None:
            self._logger.info("Dashboard request handled: path=%s", path)
            return
        self._logger.error("Dashboard request failed: path=%s error=%s", path, error)
