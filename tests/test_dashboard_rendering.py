"""Tests for HTML and JSON page rendering."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from cluster_dashboard.adapters import QueryErrorKind
from cluster_dashboard.dashboard import (
    NO_APPLICATIONS_MESSAGE,
    NO_NODES_MESSAGE,
    ClusterSnapshotService,
    PageContext,
    render_dashboard_page,
    render_error_page,
    render_explorer_redirect_page,
    render_health_payload,
    render_home_page,
    render_snapshot_payload,
    render_test_page,
)
from cluster_dashboard.domain import HealthState

from conftest import (
    FIXED_NOW,
    RecordingEventSink,
    StubClusterQueryClient,
    build_application,
    build_environment_facts,
    build_identity,
    build_node,
    build_service,
)

PAGE_CONTEXT = PageContext(
    department_name="Platform Team",
    cluster_display_name="Prod Cluster",
    dashboard_refresh_seconds=30,
    explorer_url="http://localhost:19080",
)


def _build_snapshot(query_client: StubClusterQueryClient):
    """Build one snapshot from a stub client with fixed clock and environment."""

    return ClusterSnapshotService(
        query_client=query_client,
        identity=build_identity(),
        event_sink=RecordingEventSink(),
        cluster_runtime_version="11.1.208",
        clock_provider=lambda: FIXED_NOW,
        environment_provider=build_environment_facts,
    ).snapshot_build()


def test_dashboard_render_healthy_cluster_shows_sections_and_summaries() -> None:
    """Render applications, nested services, nodes and summary labels.

    Returns:
        None: Assertions validate rendered HTML.

    Raises:
        AssertionError: Raised when expected content is missing.
    """

    snapshot = _build_snapshot(
        StubClusterQueryClient(
            nodes=(build_node("_Node_0", upgrade_domain=None),),
            applications=(build_application("fabric:/App1"), build_application("fabric:/App2", HealthState.ERROR)),
            services=(build_service("fabric:/App1/Frontend"),),
        )
    )

    html = render_dashboard_page(snapshot, PAGE_CONTEXT)

    assert "Prod Cluster Health Dashboard" in html
    assert "1 OK" in html
    assert "1 Error" in html
    assert "App1" in html
    assert "Frontend" in html
    assert "fabric:/App1/Frontend" not in html
    assert "_Node_0" in html
    assert "N/A" in html
    assert "health-error" in html
    assert "11.1.208" in html
    assert "setTimeout" in html and "30000" in html
    assert "31.4 GB" in html
    assert "0d 01h 02m 05s" in html
    assert NO_APPLICATIONS_MESSAGE not in html
    assert "2024-05-06 07:08:09" in html


def test_dashboard_render_limited_access_shows_placeholders() -> None:
    """Render placeholders and the failure notice when cluster data is missing."""

    snapshot = _build_snapshot(
        StubClusterQueryClient(
            failures={"nodes": QueryErrorKind.UNAVAILABLE, "applications": QueryErrorKind.UNAVAILABLE},
        )
    )

    html = render_dashboard_page(snapshot, PAGE_CONTEXT)

    assert NO_APPLICATIONS_MESSAGE in html
    assert NO_NODES_MESSAGE in html
    assert "No items" in html
    assert "Limited access" in html
    assert "nodes (unavailable)" in html


def test_dashboard_render_is_idempotent_for_identical_snapshot() -> None:
    """Render byte-identical output for the same snapshot."""

    snapshot = _build_snapshot(StubClusterQueryClient(nodes=(build_node("_Node_0"),)))

    assert render_dashboard_page(snapshot, PAGE_CONTEXT) == render_dashboard_page(snapshot, PAGE_CONTEXT)


def test_dashboard_render_escapes_cluster_supplied_text() -> None:
    """Escape HTML in names reported by the cluster."""

    snapshot = _build_snapshot(
        StubClusterQueryClient(applications=(build_application("fabric:/<script>alert(1)</script>"),))
    )

    html = render_dashboard_page(snapshot, PAGE_CONTEXT)

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_dashboard_health_payload_contains_identity_and_utc_timestamp() -> None:
    """Build the health payload with UTC timestamp and identity fields."""

    local_time = datetime(2024, 5, 6, 9, 8, 9, tzinfo=timezone(timedelta(hours=2)))

    payload = render_health_payload(build_identity(), local_time)

    assert payload == {
        "status": "healthy",
        "timestamp": "2024-05-06T07:08:09Z",
        "serviceName": "fabric:/ClusterDashboardApp/ClusterDashboard",
        "nodeName": "_Node_0",
        "instanceId": "4242",
        "applicationName": "fabric:/ClusterDashboardApp",
        "applicationTypeName": "ClusterDashboardAppType",
        "version": "1.0.11",
    }


def test_dashboard_static_pages_render_navigation_and_identity() -> None:
    """Render home, test and explorer pages with their key content."""

    home_html = render_home_page(PAGE_CONTEXT, FIXED_NOW)
    test_html = render_test_page(build_identity(), PAGE_CONTEXT, FIXED_NOW)
    explorer_html = render_explorer_redirect_page(PAGE_CONTEXT)

    assert "Platform Team" in home_html
    assert 'href="/health-dashboard"' in home_html
    assert 'href="/health"' in home_html
    assert 'href="/test"' in home_html
    assert "4242" in test_html
    assert "ClusterDashboardAppType" in test_html
    assert '"http://localhost:19080"' in explorer_html
    assert "3000" in explorer_html


def test_dashboard_error_page_shows_type_message_and_trace() -> None:
    """Render exception details on the error page."""

    html = render_error_page(
        "Health Dashboard",
        RuntimeError("boom <b>"),
        "Traceback (most recent call last): ...",
        PAGE_CONTEXT,
        FIXED_NOW,
    )

    assert "Health Dashboard Error" in html
    assert "RuntimeError" in html
    assert "boom &lt;b&gt;" in html
    assert "Traceback (most recent call last)" in html


def test_dashboard_snapshot_payload_is_json_serializable() -> None:
    """Serialize a snapshot to JSON-compatible payload."""

    snapshot = _build_snapshot(
        StubClusterQueryClient(
            applications=(build_application("fabric:/App1"),),
            services=(build_service("fabric:/App1/Svc"),),
            failures={"cluster_health": QueryErrorKind.TIMEOUT},
        )
    )

    payload = json.loads(json.dumps(render_snapshot_payload(snapshot)))

    assert payload["clusterHealth"] == "Unknown"
    assert payload["applications"][0]["services"][0]["name"] == "fabric:/App1/Svc"
    assert payload["summaries"]["nodes"] == [{"label": "No items", "count": 0}]
    assert payload["queryFailures"][0]["errorKind"] == "timeout"
    assert payload["limitedAccess"] is True
