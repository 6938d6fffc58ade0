"""Background HTTP listener running uvicorn over a socket bound up front.

The socket is bound before the server thread starts so that a port conflict
surfaces synchronously as `ListenerBindError` in the caller.
"""

from __future__ import annotations

import socket
import threading
import time
from dataclasses import dataclass
from typing import Final

import uvicorn
from fastapi import FastAPI

from cluster_dashboard.observability import EventSinkPort

LISTENER_THREAD_NAME: Final[str] = "dashboard-listener"
_STARTUP_POLL_INTERVAL_SECONDS: Final[float] = 0.05


class ListenerBindError(RuntimeError):
    """Raised when the listener socket cannot be bound."""


class ListenerStartError(RuntimeError):
    """Raised when the server does not start accepting connections."""


@dataclass(frozen=True)
class ListenerHandle:
    """Addresses of a started listener.

    Attributes:
        port: Bound TCP port.
        listening_address: Wildcard prefix the listener accepts, `http://+:{port}/`.
        publish_address: Address advertised to clients.
    """

    port: int
    listening_address: str
    publish_address: str


class DashboardListenerLoop:
    """Own the listener socket, the uvicorn server and its thread."""

    def __init__(
        self,
        application: FastAPI,
        event_sink: EventSinkPort,
        cancellation_event: threading.Event,
        host: str = "0.0.0.0",
        advertised_host: str = "localhost",
        startup_timeout_seconds: float = 10.0,
        shutdown_grace_seconds: float = 5.0,
        backlog: int = 128,
    ):
        """Initialize listener dependencies.

        Args:
            application: ASGI application serving every request.
            event_sink: Observability sink for listener events.
            cancellation_event: Process-wide shutdown signal.
            host: Interface to bind.
            advertised_host: Host name used in the publish address.
            startup_timeout_seconds: Maximum wait for the server to start accepting.
            shutdown_grace_seconds: Maximum wait for in-flight requests on stop.
            backlog: Listen backlog for the bound socket.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when required dependencies are missing or invalid.
        """

        if application is None:
            raise ValueError("application must not be None")
        if event_sink is None:
            raise ValueError("event_sink must not be None")
        if cancellation_event is None:
            raise ValueError("cancellation_event must not be None")
        if startup_timeout_seconds <= 0:
            raise ValueError("startup_timeout_seconds must be greater than zero")
        if shutdown_grace_seconds < 0:
            raise ValueError("shutdown_grace_seconds must not be negative")

        self._application = application
        self._event_sink = event_sink
        self._cancellation_event = cancellation_event
        self._host = host
        self._advertised_host = advertised_host
        self._startup_timeout_seconds = startup_timeout_seconds
        self._shutdown_grace_seconds = shutdown_grace_seconds
        self._backlog = backlog
        self._state_lock = threading.Lock()
        self._started = False
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._handle: ListenerHandle | None = None

    @property
    def listener_handle(self) -> ListenerHandle | None:
        """Return the handle of the running listener, if any."""

        return self._handle

    def listener_start(self, port: int) -> ListenerHandle:
        """Bind the listener socket and start accepting connections.

        Args:
            port: TCP port to bind, `0` selects a free port.

        Returns:
            ListenerHandle: Bound port and listener addresses.

        Raises:
            ValueError: Raised when port is outside the TCP range.
            RuntimeError: Raised when the listener was already started.
            ListenerBindError: Raised when the socket cannot be bound.
            ListenerStartError: Raised when the server fails to start in time.
        """

        if not 0 <= port <= 65535:
            raise ValueError(f"port must be between 0 and 65535, got {port}")

        with self._state_lock:
            if self._started:
                raise RuntimeError("listener was already started")
            self._started = True

        listener_socket = self._listener_bind_socket(port)
        bound_port = listener_socket.getsockname()[1]
        self._socket = listener_socket
        self._server = uvicorn.Server(
            uvicorn.Config(
                self._application,
                log_config=None,
                access_log=False,
                lifespan="off",
                timeout_graceful_shutdown=max(1, int(self._shutdown_grace_seconds)),
            )
        )
        self._thread = threading.Thread(target=self.listener_run_accept_loop, name=LISTENER_THREAD_NAME, daemon=True)
        self._thread.start()
        self._listener_wait_until_started()

        self._handle = ListenerHandle(
            port=bound_port,
            listening_address=f"http://+:{bound_port}/",
            publish_address=f"http://{self._advertised_host}:{bound_port}/",
        )
        self._event_sink.info(
            f"Http listener started: listening on {self._handle.listening_address}, "
            f"publish address {self._handle.publish_address}"
        )
        return self._handle

    def listener_run_accept_loop(self) -> None:
        """Serve connections until the server is asked to exit.

        Runs on the listener thread. A crash of the server is reported as an
        error event and ends the loop.

        Raises:
            RuntimeError: Raised when called before `listener_start`.
        """

        server, listener_socket = self._server, self._socket
        if server is None or listener_socket is None:
            raise RuntimeError("listener is not started")

        try:
            server.run(sockets=[listener_socket])
        except Exception as error:
            self._event_sink.error(f"Http listener error: {type(error).__name__}: {error}")
        finally:
            self._event_sink.info("Accept loop ended")

    def listener_stop(self, force: bool = False) -> None:
        """Stop accepting and release the socket. Safe to call repeatedly.

        Args:
            force: Skip the graceful drain of in-flight requests.
        """

        self._cancellation_event.set()
        with self._state_lock:
            server, thread, listener_socket = self._server, self._thread, self._socket
            self._server, self._thread, self._socket = None, None, None
            self._handle = None

        if server is None:
            return

        server.should_exit = True
        if force:
            server.force_exit = True
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._shutdown_grace_seconds + 1.0)
            if thread.is_alive():
                self._event_sink.error("Http listener did not stop within the shutdown grace period")
        if listener_socket is not None:
            listener_socket.close()
        self._event_sink.info("Http listener stopped" if not force else "Http listener aborted")

    def _listener_bind_socket(self, port: int) -> socket.socket:
        listener_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener_socket.bind((self._host, port))
            listener_socket.listen(self._backlog)
        except OSError as error:
            listener_socket.close()
            self._event_sink.error(f"Http listener error: cannot bind {self._host}:{port}: {error}")
            raise ListenerBindError(f"cannot bind {self._host}:{port}: {error}") from error
        return listener_socket

    def _listener_wait_until_started(self) -> None:
        server, thread = self._server, self._thread
        deadline = time.monotonic() + self._startup_timeout_seconds
        while not server.started:
            if not thread.is_alive():
                self.listener_stop(force=True)
                raise ListenerStartError("listener thread exited before accepting connections")
            if time.monotonic() >= deadline:
                self.listener_stop(force=True)
                raise ListenerStartError(
                    f"listener did not start within {self._startup_timeout_seconds} seconds"
                )
            time.sleep(_STARTUP_POLL_INTERVAL_SECONDS)
