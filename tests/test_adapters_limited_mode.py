"""Tests for the limited-mode cluster query adapter."""

from cluster_dashboard.adapters import LimitedModeClusterQueryClient, QueryErrorKind
from cluster_dashboard.domain import HealthState, NodeMatchKind


def test_adapters_limited_mode_answers_every_query_with_unavailable_defaults() -> None:
    """Return empty or neutral values classified as UNAVAILABLE.

    Returns:
        None: Assertions validate limited-mode defaults.

    Raises:
        AssertionError: Raised when any query succeeds or returns data.
    """

    client = LimitedModeClusterQueryClient(reason="no cluster endpoint")

    results = (
        client.query_nodes(),
        client.query_applications(),
        client.query_services("fabric:/App1"),
        client.query_current_node("_Node_0"),
        client.query_cluster_health(),
    )

    assert all(result.error_kind is QueryErrorKind.UNAVAILABLE for result in results)
    assert results[0].value == ()
    assert results[1].value == ()
    assert results[2].value == ()
    assert results[3].value.match_kind is NodeMatchKind.NOT_FOUND
    assert results[4].value is HealthState.UNKNOWN
    assert "no cluster endpoint" in results[0].detail
    assert client.query_limited_mode()
    assert client.query_source_name() == "limited_mode"


def test_adapters_limited_mode_uses_default_reason() -> None:
    """Fall back to the default reason for blank input."""

    result = LimitedModeClusterQueryClient(reason="  ").query_nodes()

    assert result.detail == "nodes query skipped: cluster API endpoint is not configured"
