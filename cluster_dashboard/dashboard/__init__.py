"""Dashboard package for snapshot assembly and page rendering."""

from .rendering import (
	NO_APPLICATIONS_MESSAGE,
	NO_NODES_MESSAGE,
	PageContext,
	render_dashboard_page,
	render_error_json,
	render_error_page,
	render_explorer_redirect_page,
	render_health_json,
	render_health_payload,
	render_home_page,
	render_snapshot_json,
	render_snapshot_payload,
	render_test_page,
)
from .snapshot_service import LIMITED_MODE_RUNTIME_VERSION, ClusterSnapshotService, snapshot_local_now

__all__ = [
	"ClusterSnapshotService",
	"LIMITED_MODE_RUNTIME_VERSION",
	"NO_APPLICATIONS_MESSAGE",
	"NO_NODES_MESSAGE",
	"PageContext",
	"render_dashboard_page",
	"render_error_json",
	"render_error_page",
	"render_explorer_redirect_page",
	"render_health_json",
	"render_health_payload",
	"render_home_page",
	"render_snapshot_json",
	"render_snapshot_payload",
	"render_test_page",
	"snapshot_local_now",
]
