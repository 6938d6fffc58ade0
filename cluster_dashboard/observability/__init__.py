"""Observability package for event emission and logging configuration."""

from .events import LoggingEventSink
from .interfaces import EventSinkPort
from .logging_setup import JSONFormatter, observability_configure_logging

__all__ = ["EventSinkPort", "JSONFormatter", "LoggingEventSink", "observability_configure_logging"]
