"""Host lifecycle adapter that opens and closes the dashboard listener."""

from __future__ import annotations

from collections.abc import Mapping

from cluster_dashboard.host import host_resolve_endpoint_port
from cluster_dashboard.observability import EventSinkPort

from .listener_loop import DashboardListenerLoop


class HttpCommunicationListener:
    """Open, close and abort the listener on behalf of the hosting runtime."""

    def __init__(
        self,
        listener_loop: DashboardListenerLoop,
        event_sink: EventSinkPort,
        endpoint_name: str,
        default_port: int,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize communication listener.

        Args:
            listener_loop: Listener to start and stop.
            event_sink: Observability sink for lifecycle events.
            endpoint_name: Named endpoint resource holding the listener port.
            default_port: Port used when the endpoint cannot be resolved.
            environ: Optional environment mapping, defaults to `os.environ`.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when required dependencies are missing.
        """

        if listener_loop is None:
            raise ValueError("listener_loop must not be None")
        if event_sink is None:
            raise ValueError("event_sink must not be None")

        self._listener_loop = listener_loop
        self._event_sink = event_sink
        self._endpoint_name = endpoint_name
        self._default_port = default_port
        self._environ = environ
        self._publish_address: str | None = None
        self._closed = False

    def listener_open(self) -> str:
        """Start the listener on the resolved endpoint port.

        Returns:
            str: Publish address, for example `http://localhost:8081/`.

        Raises:
            ListenerBindError: Raised when the port cannot be bound.
            ListenerStartError: Raised when the server fails to start.
            RuntimeError: Raised when the listener was already closed or aborted.
        """

        if self._closed:
            raise RuntimeError("listener was closed and cannot be reopened")
        if self._publish_address is not None:
            return self._publish_address

        resolution = host_resolve_endpoint_port(self._endpoint_name, self._default_port, self._environ)
        self._event_sink.info(resolution.detail)
        handle = self._listener_loop.listener_start(resolution.port)
        self._publish_address = handle.publish_address
        return self._publish_address

    def listener_close(self) -> None:
        """Stop the listener after draining in-flight requests."""

        self._listener_release(force=False)

    def listener_abort(self) -> None:
        """Stop the listener without draining in-flight requests."""

        self._listener_release(force=True)

    def _listener_release(self, force: bool) -> None:
        self._closed = True
        self._publish_address = None
        self._listener_loop.listener_stop(force=force)
