"""Tests for the background listener over a real loopback socket."""

from __future__ import annotations

import socket
import threading

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from cluster_dashboard.server import (
    DashboardListenerLoop,
    HttpCommunicationListener,
    ListenerBindError,
)


def _build_application(slow_entered: threading.Event | None = None, slow_release: threading.Event | None = None) -> FastAPI:
    """Create minimal ASGI application for listener tests.

    Args:
        slow_entered: Set when the `/slow` handler starts.
        slow_release: Awaited by the `/slow` handler before it answers.

    Returns:
        FastAPI: Application with `/ping` and `/slow` routes.
    """

    application = FastAPI()

    @application.get("/slow")
    def _slow() -> PlainTextResponse:
        if slow_entered is not None:
            slow_entered.set()
        if slow_release is not None:
            slow_release.wait(timeout=10.0)
        return PlainTextResponse("slow")

    @application.get("/ping")
    def _ping() -> PlainTextResponse:
        return PlainTextResponse("pong")

    return application


def _build_listener(
    event_sink,
    cancellation_event: threading.Event | None = None,
    application: FastAPI | None = None,
) -> DashboardListenerLoop:
    """Create listener bound to loopback with short timeouts."""

    return DashboardListenerLoop(
        application=application or _build_application(),
        event_sink=event_sink,
        cancellation_event=cancellation_event or threading.Event(),
        host="127.0.0.1",
        startup_timeout_seconds=10.0,
        shutdown_grace_seconds=1.0,
    )


def test_server_listener_serves_requests_and_stops_idempotently(event_sink) -> None:
    """Accept HTTP requests after start and release the port on stop.

    Args:
        event_sink: Recording event sink fixture.

    Returns:
        None: Assertions validate listener lifecycle.

    Raises:
        AssertionError: Raised when lifecycle behavior is wrong.
    """

    cancellation_event = threading.Event()
    listener = _build_listener(event_sink, cancellation_event)

    handle = listener.listener_start(0)
    try:
        response = httpx.get(f"http://127.0.0.1:{handle.port}/ping", timeout=5.0)
    finally:
        listener.listener_stop()
    listener.listener_stop()

    assert response.status_code == 200
    assert response.text == "pong"
    assert handle.listening_address == f"http://+:{handle.port}/"
    assert handle.publish_address == f"http://localhost:{handle.port}/"
    assert cancellation_event.is_set()
    assert "Accept loop ended" in event_sink.info_messages
    assert listener.listener_handle is None


def test_server_listener_bind_conflict_raises_bind_error(event_sink) -> None:
    """Raise ListenerBindError when the port is already taken.

    Args:
        event_sink: Recording event sink fixture.

    Returns:
        None: Assertions validate bind failure.

    Raises:
        AssertionError: Raised when the conflict is not reported.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as occupying_socket:
        occupying_socket.bind(("127.0.0.1", 0))
        occupying_socket.listen(1)
        occupied_port = occupying_socket.getsockname()[1]

        with pytest.raises(ListenerBindError):
            _build_listener(event_sink).listener_start(occupied_port)

    assert event_sink.error_messages


def test_server_listener_rejects_second_start(event_sink) -> None:
    """Raise RuntimeError when start is called twice."""

    listener = _build_listener(event_sink)
    listener.listener_start(0)
    try:
        with pytest.raises(RuntimeError, match="already started"):
            listener.listener_start(0)
    finally:
        listener.listener_stop(force=True)


def test_server_listener_stop_before_start_is_noop(event_sink) -> None:
    """Allow stop without a prior start."""

    listener = _build_listener(event_sink)

    listener.listener_stop()

    assert event_sink.info_messages == []


def test_server_communication_listener_uses_endpoint_port(event_sink) -> None:
    """Open on the port published by the named endpoint.

    Args:
        event_sink: Recording event sink fixture.

    Returns:
        None: Assertions validate port resolution and address reuse.

    Raises:
        AssertionError: Raised when the endpoint port is ignored.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as port_socket:
        port_socket.bind(("127.0.0.1", 0))
        free_port = port_socket.getsockname()[1]

    communication_listener = HttpCommunicationListener(
        listener_loop=_build_listener(event_sink),
        event_sink=event_sink,
        endpoint_name="ServiceEndpoint",
        default_port=1,
        environ={"Fabric_Endpoint_ServiceEndpoint": str(free_port)},
    )

    publish_address = communication_listener.listener_open()
    try:
        assert publish_address == f"http://localhost:{free_port}/"
        assert communication_listener.listener_open() == publish_address
        assert f"Got port from endpoint: {free_port}" in event_sink.info_messages
    finally:
        communication_listener.listener_close()
    communication_listener.listener_abort()


def test_server_listener_slow_request_does_not_block_other_clients(event_sink) -> None:
    """Answer a second client while another request is still in progress.

    Args:
        event_sink: Recording event sink fixture.

    Returns:
        None: Assertions validate concurrent request handling.

    Raises:
        AssertionError: Raised when the fast request waits for the slow one.
    """

    slow_entered = threading.Event()
    slow_release = threading.Event()
    listener = _build_listener(event_sink, application=_build_application(slow_entered, slow_release))
    handle = listener.listener_start(0)
    slow_responses: list[httpx.Response] = []

    def _request_slow() -> None:
        slow_responses.append(httpx.get(f"http://127.0.0.1:{handle.port}/slow", timeout=15.0))

    slow_thread = threading.Thread(target=_request_slow, name="slow-client")
    slow_thread.start()
    try:
        assert slow_entered.wait(timeout=5.0)
        fast_response = httpx.get(f"http://127.0.0.1:{handle.port}/ping", timeout=2.0)
        assert not slow_release.is_set()
    finally:
        slow_release.set()
        slow_thread.join(timeout=15.0)
        listener.listener_stop()

    assert fast_response.status_code == 200
    assert fast_response.text == "pong"
    assert slow_responses[0].text == "slow"


def test_server_communication_listener_cannot_reopen_after_close(event_sink) -> None:
    """Reject reopening a closed listener instead of returning a stale address.

    Args:
        event_sink: Recording event sink fixture.

    Returns:
        None: Assertions validate the closed state.

    Raises:
        AssertionError: Raised when a closed listener reports an address.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as port_socket:
        port_socket.bind(("127.0.0.1", 0))
        free_port = port_socket.getsockname()[1]

    communication_listener = HttpCommunicationListener(
        listener_loop=_build_listener(event_sink),
        event_sink=event_sink,
        endpoint_name="ServiceEndpoint",
        default_port=1,
        environ={"Fabric_Endpoint_ServiceEndpoint": str(free_port)},
    )

    communication_listener.listener_open()
    communication_listener.listener_close()

    with pytest.raises(RuntimeError, match="cannot be reopened"):
        communication_listener.listener_open()
    communication_listener.listener_abort()
    with pytest.raises(RuntimeError, match="cannot be reopened"):
        communication_listener.listener_open()
