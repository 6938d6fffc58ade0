"""Typed interfaces for observability event emission."""

from typing import Protocol


class EventSinkPort(Protocol):
    """Port for operational events emitted by the listener and request router.

    One sink is constructed at process start and passed explicitly to every
    component that emits events.
    """

    def info(self, message: str) -> None:
        """Emit one informational event.

        Args:
            message: Event message.
        """

    def error(self, message: str) -> None:
        """Emit one error event.

        Args:
            message: Event message.
        """

    def request_started(self, path: str) -> None:
        """Emit one request-start event.

        Args:
            path: Request URL path.
        """

    def request_finished(self, path: str, error: str | None = None) -> None:
        """Emit one request-handled or request-failed event.

        Args:
            path: Request URL path.
            error: Failure message, `None` when the request succeeded.
        """
