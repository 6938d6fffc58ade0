"""Typed domain models shared across runtime layers.

All entities are request-scoped and immutable. A fresh set is fetched for
every dashboard render and discarded once the response is written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeVar

_WireEnumT = TypeVar("_WireEnumT", bound="_WireEnum")


class _WireEnum(str, Enum):
    """String enum parsed case-insensitively from cluster API payloads."""

    @classmethod
    def from_wire(cls: type[_WireEnumT], value: object) -> _WireEnumT:
        """Parse one wire value, defaulting to the `UNKNOWN` member.

        Args:
            value: Raw wire value, usually a string such as `Ok` or `Invalid`.

        Returns:
            _WireEnumT: Matching member or `UNKNOWN` for unrecognized values.
        """

        if isinstance(value, cls):
            return value
        normalized_value = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == normalized_value:
                return member
        return cls["UNKNOWN"]


class HealthState(_WireEnum):
    """Coarse health classification reported by the cluster.

    The cluster API also reports `Invalid`; it parses to `UNKNOWN` like any
    other unrecognized value.
    """

    OK = "Ok"
    WARNING = "Warning"
    ERROR = "Error"
    UNKNOWN = "Unknown"


class NodeStatus(_WireEnum):
    """Operational status of one cluster node."""

    UP = "Up"
    DOWN = "Down"
    DISABLING = "Disabling"
    DISABLED = "Disabled"
    UNKNOWN = "Unknown"


class ServiceKind(_WireEnum):
    """Service kind reported by the cluster."""

    STATELESS = "Stateless"
    STATEFUL = "Stateful"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class NodeInfo:
    """One cluster node as returned by the node list query.

    Attributes:
        name: Node name, unique within one snapshot.
        ip_address_or_fqdn: Node address.
        status: Operational status.
        health_state: Aggregated node health.
        fault_domain: Optional fault domain path.
        upgrade_domain: Optional upgrade domain label.
    """

    name: str
    ip_address_or_fqdn: str
    status: NodeStatus
    health_state: HealthState
    fault_domain: str | None = None
    upgrade_domain: str | None = None


@dataclass(frozen=True)
class ApplicationInfo:
    """One deployed application.

    Attributes:
        name: Fully qualified application name, for example `fabric:/App1`.
        type_name: Application type name.
        type_version: Application type version.
        health_state: Aggregated application health.
    """

    name: str
    type_name: str
    type_version: str
    health_state: HealthState


@dataclass(frozen=True)
class ServiceInfo:
    """One service owned by an application through its name prefix.

    Attributes:
        name: Fully qualified service name, for example `fabric:/App1/Svc1`.
        kind: Stateless or stateful.
        type_name: Service type name.
        health_state: Aggregated service health.
    """

    name: str
    kind: ServiceKind
    type_name: str
    health_state: HealthState


@dataclass(frozen=True)
class HostIdentity:
    """Identity of the running dashboard instance inside the hosting runtime.

    Attributes:
        service_name: Fully qualified service name.
        node_name: Node hosting this instance.
        instance_id: Service instance identifier.
        application_name: Owning application name.
        application_type_name: Owning application type name.
        service_version: Version string reported by the health endpoint.
    """

    service_name: str
    node_name: str
    instance_id: str
    application_name: str
    application_type_name: str
    service_version: str


@dataclass(frozen=True)
class EnvironmentFacts:
    """Process and machine facts captured for one render.

    Attributes:
        hostname: Local machine name.
        local_ip_address: First local IPv4 address or loopback.
        runtime_version: Python implementation and version.
        os_description: Operating system description.
        cpu_cores: Logical CPU count.
        total_memory_gb: Physical memory in GiB when it can be determined.
        uptime_seconds: Seconds since this process started.
    """

    hostname: str
    local_ip_address: str
    runtime_version: str
    os_description: str
    cpu_cores: int
    total_memory_gb: float | None
    uptime_seconds: float


class HealthDisplayCategory(str, Enum):
    """Fixed rendering categories for health states."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    UNKNOWN = "unknown"

    @property
    def css_class(self) -> str:
        """Return the CSS class used by page templates."""

        return f"health-{self.value}"


@dataclass(frozen=True)
class HealthSummaryEntry:
    """One `(label, count)` entry of a health summary.

    Attributes:
        label: Display label (`OK`, `Warning`, `Error`, `Unknown` or `No items`).
        count: Number of entities in this category.
        category: Display category, `None` for the empty-input marker.
    """

    label: str
    count: int
    category: HealthDisplayCategory | None

    @property
    def is_empty_marker(self) -> bool:
        """Return whether this entry is the "No items" marker."""

        return self.category is None


class NodeMatchKind(str, Enum):
    """How the current node was resolved from the node list."""

    EXACT = "exact"
    FIRST_AVAILABLE = "first_available"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class CurrentNodeLookup:
    """Result of resolving the node that hosts this instance.

    Attributes:
        match_kind: Resolution outcome.
        node: Resolved node, absent only when `match_kind` is `NOT_FOUND`.
    """

    match_kind: NodeMatchKind
    node: NodeInfo | None = None


@dataclass(frozen=True)
class CurrentNodeView:
    """Display fields for the node handling the current request.

    Attributes:
        name: Node name or local machine name fallback.
        ip_address: Local IP address.
        hostname: Local machine name.
        match_kind: How the node was resolved.
    """

    name: str
    ip_address: str
    hostname: str
    match_kind: NodeMatchKind


@dataclass(frozen=True)
class ApplicationView:
    """Application with the services associated by name prefix.

    Attributes:
        application: Application entity.
        services: Services whose names start with the application name.
    """

    application: ApplicationInfo
    services: tuple[ServiceInfo, ...]


@dataclass(frozen=True)
class QueryFailure:
    """One cluster query that failed softly during snapshot assembly.

    Attributes:
        query_name: Query label such as `nodes` or `services:fabric:/App1`.
        error_kind: Error classification value.
        detail: Diagnostic message.
    """

    query_name: str
    error_kind: str
    detail: str


@dataclass(frozen=True)
class ClusterSnapshot:
    """Best-effort aggregate of cluster entities gathered for one render.

    Sub-queries are not transactional: nodes and applications may reflect
    slightly different instants.

    Attributes:
        generated_at: Local timestamp of snapshot assembly.
        nodes: Node list.
        applications: Application list.
        services: Services across all applications.
        application_views: Applications with their associated services.
        node_health_summary: Health summary for nodes.
        application_health_summary: Health summary for applications.
        service_health_summary: Health summary for services.
        cluster_health: Aggregated cluster health state.
        cluster_runtime_version: Configured cluster runtime version label.
        current_node: Node handling this request.
        environment: Process and machine facts.
        query_failures: Sub-queries that failed softly.
    """

    generated_at: datetime
    nodes: tuple[NodeInfo, ...]
    applications: tuple[ApplicationInfo, ...]
    services: tuple[ServiceInfo, ...]
    application_views: tuple[ApplicationView, ...]
    node_health_summary: tuple[HealthSummaryEntry, ...]
    application_health_summary: tuple[HealthSummaryEntry, ...]
    service_health_summary: tuple[HealthSummaryEntry, ...]
    cluster_health: HealthState
    cluster_runtime_version: str
    current_node: CurrentNodeView
    environment: EnvironmentFacts
    query_failures: tuple[QueryFailure, ...] = field(default=())

    @property
    def limited_access(self) -> bool:
        """Return whether any sub-query failed during assembly."""

        return bool(self.query_failures)
