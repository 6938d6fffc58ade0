"""FastAPI application factory for the dashboard listener.

Every GET path is delegated to `DashboardRequestRouter`, which owns route
matching, fallback to the home page, and the per-request failure boundary.
"""

from fastapi import FastAPI, Request, Response

from .routing import DashboardRequestRouter


def create_api_application(router: DashboardRequestRouter) -> FastAPI:
    """Create the FastAPI application instance for the dashboard.

    Interactive documentation routes are disabled so that every path reaches
    the dashboard router.

    Args:
        router: Request router producing page responses.

    Returns:
        FastAPI: Framework application instance with one catch-all route.

    Raises:
        ValueError: Raised when router is missing.
    """

    if router is None:
        raise ValueError("router must not be None")

    application = FastAPI(title="Cluster Health Dashboard", docs_url=None, redoc_url=None, openapi_url=None)

    @application.get("/{request_path:path}", include_in_schema=False)
    def api_dashboard_page(request: Request, request_path: str) -> Response:
        """Return the page for the requested path.

        Returns:
            Response: Page body with explicit content type and status code.
        """

        dashboard_response = router.route_handle(request.url.path)
        return Response(
            content=dashboard_response.body,
            status_code=dashboard_response.status_code,
            headers={"Content-Type": dashboard_response.content_type},
        )

    return application
