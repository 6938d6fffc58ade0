"""Request routing from URL path to page handler.

The router owns the failure boundary for page handlers: any exception raised
while building a page becomes an HTTP 500 response carrying an error page, and
the listener never sees it.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Final

from cluster_dashboard.dashboard import (
    ClusterSnapshotService,
    PageContext,
    render_dashboard_page,
    render_error_json,
    render_error_page,
    render_explorer_redirect_page,
    render_health_json,
    render_home_page,
    render_test_page,
    snapshot_local_now,
)
from cluster_dashboard.domain import HostIdentity
from cluster_dashboard.observability import EventSinkPort

HTML_CONTENT_TYPE: Final[str] = "text/html; charset=utf-8"
JSON_CONTENT_TYPE: Final[str] = "application/json; charset=utf-8"


@dataclass(frozen=True)
class RouteDefinition:
    """One entry of the routing table.

    Attributes:
        route_name: Stable handler key.
        path: Canonical lower-case URL path.
        page_title: Human-readable page name used on error pages.
        content_type: Response content type including charset.
    """

    route_name: str
    path: str
    page_title: str
    content_type: str

    @property
    def is_json(self) -> bool:
        """Return whether the route answers with a JSON body."""

        return self.content_type == JSON_CONTENT_TYPE


@dataclass(frozen=True)
class DashboardResponse:
    """Transport-neutral response produced by the router.

    Attributes:
        body: Encoded-later response text.
        status_code: HTTP status code.
        content_type: Content type including charset.
    """

    body: str
    status_code: int
    content_type: str


HOME_ROUTE: Final[RouteDefinition] = RouteDefinition("home", "/", "Home", HTML_CONTENT_TYPE)
ROUTE_TABLE: Final[tuple[RouteDefinition, ...]] = (
    HOME_ROUTE,
    RouteDefinition("health_dashboard", "/health-dashboard", "Health Dashboard", HTML_CONTENT_TYPE),
    RouteDefinition("health", "/health", "Health Check", JSON_CONTENT_TYPE),
    RouteDefinition("test", "/test", "Test Endpoint", HTML_CONTENT_TYPE),
    RouteDefinition("service_fabric_explorer", "/service-fabric-explorer", "Cluster Explorer", HTML_CONTENT_TYPE),
)
_ROUTES_BY_PATH: Final[dict[str, RouteDefinition]] = {route.path: route for route in ROUTE_TABLE}


def route_resolve(path: str) -> RouteDefinition:
    """Map a URL path to its route definition.

    Matching is case-insensitive and exact. Unmatched paths resolve to the
    home route.

    Args:
        path: Request URL path without query string.

    Returns:
        RouteDefinition: Matched route, home route when nothing matches.
    """

    return _ROUTES_BY_PATH.get((path or "/").lower(), HOME_ROUTE)


class DashboardRequestRouter:
    """Dispatch request paths to page handlers and contain handler failures."""

    def __init__(
        self,
        snapshot_service: ClusterSnapshotService,
        identity: HostIdentity,
        page_context: PageContext,
        event_sink: EventSinkPort,
        clock_provider: Callable[[], datetime] = snapshot_local_now,
    ):
        """Initialize router dependencies.

        Args:
            snapshot_service: Builder of fresh cluster snapshots.
            identity: Identity of this dashboard instance.
            page_context: Static page settings.
            event_sink: Observability sink for request events.
            clock_provider: Clock used for page and payload timestamps.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when required dependencies are missing.
        """

        if snapshot_service is None:
            raise ValueError("snapshot_service must not be None")
        if identity is None:
            raise ValueError("identity must not be None")
        if page_context is None:
            raise ValueError("page_context must not be None")
        if event_sink is None:
            raise ValueError("event_sink must not be None")

        self._snapshot_service = snapshot_service
        self._identity = identity
        self._page_context = page_context
        self._event_sink = event_sink
        self._clock_provider = clock_provider
        self._handlers: dict[str, Callable[[], str]] = {
            "home": self._route_home,
            "health_dashboard": self._route_health_dashboard,
            "health": self._route_health,
            "test": self._route_test,
            "service_fabric_explorer": self._route_service_fabric_explorer,
        }

    def route_resolve(self, path: str) -> RouteDefinition:
        """Map a URL path to its route definition, see module `route_resolve`."""

        return route_resolve(path)

    def route_handle(self, path: str) -> DashboardResponse:
        """Produce the response for one request path.

        Args:
            path: Request URL path without query string.

        Returns:
            DashboardResponse: Page response, or a 500 error response when the
            handler failed.
        """

        route = self.route_resolve(path)
        self._event_sink.request_started(path)
        try:
            body = self._handlers[route.route_name]()
        except Exception as error:
            self._event_sink.request_finished(path, error=f"{type(error).__name__}: {error}")
            return self._route_error_response(route, error, traceback.format_exc())

        self._event_sink.request_finished(path)
        return DashboardResponse(body=body, status_code=200, content_type=route.content_type)

    def _route_error_response(self, route: RouteDefinition, error: Exception, stack_trace: str) -> DashboardResponse:
        rendered_at = self._clock_provider()
        if route.is_json:
            body = render_error_json(error, rendered_at)
        else:
            body = render_error_page(route.page_title, error, stack_trace, self._page_context, rendered_at)
        return DashboardResponse(body=body, status_code=500, content_type=route.content_type)

    def _route_home(self) -> str:
        return render_home_page(self._page_context, self._clock_provider())

    def _route_health_dashboard(self) -> str:
        return render_dashboard_page(self._snapshot_service.snapshot_build(), self._page_context)

    def _route_health(self) -> str:
        return render_health_json(self._identity, self._clock_provider())

    def _route_test(self) -> str:
        return render_test_page(self._identity, self._page_context, self._clock_provider())

    def _route_service_fabric_explorer(self) -> str:
        return render_explorer_redirect_page(self._page_context)
