"""Server package for the listener loop and host lifecycle."""

from .communication_listener import HttpCommunicationListener
from .listener_loop import (
	LISTENER_THREAD_NAME,
	DashboardListenerLoop,
	ListenerBindError,
	ListenerHandle,
	ListenerStartError,
)

__all__ = [
	"DashboardListenerLoop",
	"HttpCommunicationListener",
	"LISTENER_THREAD_NAME",
	"ListenerBindError",
	"ListenerHandle",
	"ListenerStartError",
]
