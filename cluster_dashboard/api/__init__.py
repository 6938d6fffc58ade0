"""API layer package for request routing and FastAPI composition."""

from .application import create_api_application
from .routing import (
	HOME_ROUTE,
	HTML_CONTENT_TYPE,
	JSON_CONTENT_TYPE,
	ROUTE_TABLE,
	DashboardRequestRouter,
	DashboardResponse,
	RouteDefinition,
	route_resolve,
)

__all__ = [
	"DashboardRequestRouter",
	"DashboardResponse",
	"HOME_ROUTE",
	"HTML_CONTENT_TYPE",
	"JSON_CONTENT_TYPE",
	"ROUTE_TABLE",
	"RouteDefinition",
	"create_api_application",
	"route_resolve",
]
