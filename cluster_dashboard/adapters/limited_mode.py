"""Cluster query adapter used when no cluster endpoint is available."""

from __future__ import annotations

from typing import Final

from cluster_dashboard.domain import (
    ApplicationInfo,
    CurrentNodeLookup,
    HealthState,
    NodeInfo,
    NodeMatchKind,
    ServiceInfo,
)

from .interfaces import ClusterQueryPort, QueryErrorKind, QueryResult


class LimitedModeClusterQueryClient(ClusterQueryPort):
    """Answer every query with an `UNAVAILABLE` failure and empty defaults.

    The dashboard stays servable and shows local identity facts only.
    """

    _DEFAULT_REASON: Final[str] = "cluster API endpoint is not configured"

    def __init__(self, reason: str | None = None):
        """Initialize limited-mode adapter.

        Args:
            reason: Optional diagnostic explaining why no cluster client exists.

        Returns:
            None: Initializer does not return a value.
        """

        self._reason = (reason or "").strip() or self._DEFAULT_REASON

    def query_source_name(self) -> str:
        return "limited_mode"

    def query_limited_mode(self) -> bool:
        return True

    def query_nodes(self) -> QueryResult[tuple[NodeInfo, ...]]:
        return self._adapter_unavailable("nodes", ())

    def query_applications(self) -> QueryResult[tuple[ApplicationInfo, ...]]:
        return self._adapter_unavailable("applications", ())

    def query_services(self, application_name: str) -> QueryResult[tuple[ServiceInfo, ...]]:
        return self._adapter_unavailable(f"services:{application_name}", ())

    def query_current_node(self, self_node_name: str | None) -> QueryResult[CurrentNodeLookup]:
        _ = self_node_name
        return self._adapter_unavailable("nodes", CurrentNodeLookup(match_kind=NodeMatchKind.NOT_FOUND))

    def query_cluster_health(self) -> QueryResult[HealthState]:
        return self._adapter_unavailable("cluster_health", HealthState.UNKNOWN)

    def _adapter_unavailable(self, query_name: str, fallback_value):
        return QueryResult.failure(
            fallback_value,
            QueryErrorKind.UNAVAILABLE,
            f"{query_name} query skipped: {self._reason}",
        )
