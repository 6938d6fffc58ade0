"""Typed interfaces for cluster query adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar

from cluster_dashboard.domain import ApplicationInfo, CurrentNodeLookup, HealthState, NodeInfo, ServiceInfo

ValueT = TypeVar("ValueT")


class QueryErrorKind(str, Enum):
    """Classification of soft cluster query failures."""

    UNAVAILABLE = "unavailable"
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class QueryResult(Generic[ValueT]):
    """Result contract for read-only cluster queries.

    A failed query still carries a usable default value (an empty tuple or a
    neutral state) so callers can render without special-casing absence.

    Attributes:
        value: Query value, or the default value when the query failed.
        error_kind: Failure classification, `None` on success.
        detail: Diagnostic message for failures.
    """

    value: ValueT
    error_kind: QueryErrorKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Return whether the query succeeded."""

        return self.error_kind is None

    @classmethod
    def success(cls, value: ValueT) -> QueryResult[ValueT]:
        """Build a successful result."""

        return cls(value=value)

    @classmethod
    def failure(cls, value: ValueT, error_kind: QueryErrorKind, detail: str) -> QueryResult[ValueT]:
        """Build a failed result carrying the default value."""

        return cls(value=value, error_kind=error_kind, detail=detail)


class ClusterQueryPort(Protocol):
    """Port definition for read-only cluster inventory and health queries.

    Implementations never raise for upstream failures. Every operation
    returns a `QueryResult` whose value is an empty collection or neutral
    default when the upstream call failed.
    """

    def query_source_name(self) -> str:
        """Return adapter source identifier for diagnostics.

        Returns:
            str: Human-readable upstream source identifier.
        """

    def query_limited_mode(self) -> bool:
        """Return whether the adapter runs without a cluster connection.

        Returns:
            bool: True when every query is answered with defaults.
        """

    def query_nodes(self) -> QueryResult[tuple[NodeInfo, ...]]:
        """List cluster nodes.

        Returns:
            QueryResult[tuple[NodeInfo, ...]]: Nodes, empty on failure.
        """

    def query_applications(self) -> QueryResult[tuple[ApplicationInfo, ...]]:
        """List deployed applications.

        Returns:
            QueryResult[tuple[ApplicationInfo, ...]]: Applications, empty on failure.
        """

    def query_services(self, application_name: str) -> QueryResult[tuple[ServiceInfo, ...]]:
        """List services of one application.

        Args:
            application_name: Fully qualified application name.

        Returns:
            QueryResult[tuple[ServiceInfo, ...]]: Services, empty on failure.
        """

    def query_current_node(self, self_node_name: str | None) -> QueryResult[CurrentNodeLookup]:
        """Resolve the node hosting this instance.

        Args:
            self_node_name: Node name from the host identity.

        Returns:
            QueryResult[CurrentNodeLookup]: Lookup outcome, `NOT_FOUND` on failure.
        """

    def query_cluster_health(self) -> QueryResult[HealthState]:
        """Return aggregated cluster health.

        Returns:
            QueryResult[HealthState]: Aggregated health, `UNKNOWN` on failure.
        """
