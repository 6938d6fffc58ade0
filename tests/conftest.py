"""Shared test doubles for dashboard tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cluster_dashboard.adapters import QueryErrorKind, QueryResult
from cluster_dashboard.domain import (
    ApplicationInfo,
    CurrentNodeLookup,
    EnvironmentFacts,
    HealthState,
    HostIdentity,
    NodeInfo,
    NodeMatchKind,
    NodeStatus,
    ServiceInfo,
    ServiceKind,
    domain_resolve_current_node,
)

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


class RecordingEventSink:
    """Test double that records every emitted event in memory."""

    def __init__(self) -> None:
        self.info_messages: list[str] = []
        self.error_messages: list[str] = []
        self.started_paths: list[str] = []
        self.finished_requests: list[tuple[str, str | None]] = []

    def info(self, message: str) -> None:
        self.info_messages.append(message)

    def error(self, message: str) -> None:
        self.error_messages.append(message)

    def request_started(self, path: str) -> None:
        self.started_paths.append(path)

    def request_finished(self, path: str, error: str | None = None) -> None:
        self.finished_requests.append((path, error))


class StubClusterQueryClient:
    """Test double returning canned cluster data or canned failures.

    Failures are configured per query name (`nodes`, `applications`,
    `services`, `cluster_health`) as an error kind.
    """

    def __init__(
        self,
        nodes: tuple[NodeInfo, ...] = (),
        applications: tuple[ApplicationInfo, ...] = (),
        services: tuple[ServiceInfo, ...] = (),
        cluster_health: HealthState = HealthState.OK,
        failures: dict[str, QueryErrorKind] | None = None,
        limited_mode: bool = False,
    ) -> None:
        self._nodes = nodes
        self._applications = applications
        self._services = services
        self._cluster_health = cluster_health
        self._failures = failures or {}
        self._limited_mode = limited_mode
        self.services_calls: list[str] = []

    def query_source_name(self) -> str:
        return "stub"

    def query_limited_mode(self) -> bool:
        return self._limited_mode

    def query_nodes(self) -> QueryResult[tuple[NodeInfo, ...]]:
        return self._stub_result("nodes", self._nodes, ())

    def query_applications(self) -> QueryResult[tuple[ApplicationInfo, ...]]:
        return self._stub_result("applications", self._applications, ())

    def query_services(self, application_name: str) -> QueryResult[tuple[ServiceInfo, ...]]:
        self.services_calls.append(application_name)
        owned_services = tuple(
            service for service in self._services if service.name.startswith(application_name + "/")
        )
        return self._stub_result("services", owned_services, ())

    def query_current_node(self, self_node_name: str | None) -> QueryResult[CurrentNodeLookup]:
        if "nodes" in self._failures:
            return self._stub_result("nodes", None, CurrentNodeLookup(match_kind=NodeMatchKind.NOT_FOUND))
        return QueryResult.success(domain_resolve_current_node(self._nodes, self_node_name))

    def query_cluster_health(self) -> QueryResult[HealthState]:
        return self._stub_result("cluster_health", self._cluster_health, HealthState.UNKNOWN)

    def _stub_result(self, query_name: str, value, fallback_value):
        error_kind = self._failures.get(query_name)
        if error_kind is None:
            return QueryResult.success(value)
        return QueryResult.failure(fallback_value, error_kind, f"{query_name} query failed: stub")


def build_identity(node_name: str = "_Node_0") -> HostIdentity:
    """Create deterministic host identity for tests."""

    return HostIdentity(
        service_name="fabric:/ClusterDashboardApp/ClusterDashboard",
        node_name=node_name,
        instance_id="4242",
        application_name="fabric:/ClusterDashboardApp",
        application_type_name="ClusterDashboardAppType",
        service_version="1.0.11",
    )


def build_environment_facts() -> EnvironmentFacts:
    """Create deterministic environment facts for tests."""

    return EnvironmentFacts(
        hostname="dashboard-host",
        local_ip_address="10.0.0.4",
        runtime_version="CPython 3.12.1",
        os_description="Linux-6.1",
        cpu_cores=8,
        total_memory_gb=31.4,
        uptime_seconds=3725.0,
    )


def build_node(name: str, health_state: HealthState = HealthState.OK, **overrides) -> NodeInfo:
    """Create one node with sensible defaults."""

    values = {
        "name": name,
        "ip_address_or_fqdn": "10.0.0.4",
        "status": NodeStatus.UP,
        "health_state": health_state,
        "fault_domain": "fd:/0",
        "upgrade_domain": "0",
    }
    values.update(overrides)
    return NodeInfo(**values)


def build_application(name: str, health_state: HealthState = HealthState.OK) -> ApplicationInfo:
    """Create one application with sensible defaults."""

    return ApplicationInfo(name=name, type_name="AppType", type_version="1.0.0", health_state=health_state)


def build_service(name: str, health_state: HealthState = HealthState.OK) -> ServiceInfo:
    """Create one stateless service with sensible defaults."""

    return ServiceInfo(name=name, kind=ServiceKind.STATELESS, type_name="SvcType", health_state=health_state)


@pytest.fixture
def event_sink() -> RecordingEventSink:
    """Provide a fresh recording event sink."""

    return RecordingEventSink()
