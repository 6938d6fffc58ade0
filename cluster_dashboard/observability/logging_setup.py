"""Logging configuration for the dashboard process.

Log records go to stderr either as human-readable lines or as one JSON
object per line for log collectors on cluster nodes.
"""

import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "cluster_dashboard"


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def observability_configure_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure the `cluster_dashboard` logger hierarchy.

    Args:
        level: Log level name such as `INFO` or `DEBUG`.
        json_format: If True, use JSON structured output. Otherwise human-readable.

    Returns:
        logging.Logger: Configured package root logger.
    """

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()
    root.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root.addHandler(handler)
    return root
