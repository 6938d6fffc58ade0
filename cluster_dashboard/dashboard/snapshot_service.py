"""Cluster snapshot assembly for one dashboard render."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Final

from cluster_dashboard.adapters import ClusterQueryPort, QueryResult
from cluster_dashboard.domain import (
    ApplicationView,
    ClusterSnapshot,
    CurrentNodeView,
    EnvironmentFacts,
    HostIdentity,
    QueryFailure,
    ServiceInfo,
    domain_associate_services,
    domain_resolve_current_node,
    domain_summarize_health,
)
from cluster_dashboard.host import host_collect_environment_facts
from cluster_dashboard.observability import EventSinkPort

LIMITED_MODE_RUNTIME_VERSION: Final[str] = "Unknown (Limited Mode)"


def snapshot_local_now() -> datetime:
    """Return the current local time as an offset-aware datetime."""

    return datetime.now().astimezone()


class ClusterSnapshotService:
    """Build a fresh, best-effort `ClusterSnapshot` on every call.

    Sub-queries run sequentially and are not transactional with respect to
    each other. Failed sub-queries contribute empty data and are listed in
    `ClusterSnapshot.query_failures`.
    """

    def __init__(
        self,
        query_client: ClusterQueryPort,
        identity: HostIdentity,
        event_sink: EventSinkPort,
        cluster_runtime_version: str,
        cancellation_event: threading.Event | None = None,
        clock_provider: Callable[[], datetime] = snapshot_local_now,
        environment_provider: Callable[[], EnvironmentFacts] = host_collect_environment_facts,
    ):
        """Initialize snapshot service dependencies.

        Args:
            query_client: Read-only cluster query adapter.
            identity: Identity of this dashboard instance.
            event_sink: Observability sink for soft query failures.
            cluster_runtime_version: Configured cluster runtime version label.
            cancellation_event: Process-wide shutdown signal.
            clock_provider: Clock used for the snapshot timestamp.
            environment_provider: Callable returning process and machine facts.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when required dependencies are missing.
        """

        if query_client is None:
            raise ValueError("query_client must not be None")
        if identity is None:
            raise ValueError("identity must not be None")
        if event_sink is None:
            raise ValueError("event_sink must not be None")

        self._query_client = query_client
        self._identity = identity
        self._event_sink = event_sink
        self._cluster_runtime_version = cluster_runtime_version
        self._cancellation_event = cancellation_event or threading.Event()
        self._clock_provider = clock_provider
        self._environment_provider = environment_provider

    def snapshot_build(self) -> ClusterSnapshot:
        """Query the cluster and aggregate one snapshot.

        Returns:
            ClusterSnapshot: Display-ready snapshot, possibly partial.
        """

        query_failures: list[QueryFailure] = []

        nodes_result = self._query_client.query_nodes()
        self._snapshot_record_failure("nodes", nodes_result, query_failures)
        applications_result = self._query_client.query_applications()
        self._snapshot_record_failure("applications", applications_result, query_failures)
        services = self._snapshot_collect_services(applications_result.value, query_failures)
        cluster_health_result = self._query_client.query_cluster_health()
        self._snapshot_record_failure("cluster_health", cluster_health_result, query_failures)

        nodes = nodes_result.value
        applications = applications_result.value
        environment = self._environment_provider()
        services_by_application = domain_associate_services(applications, services)

        return ClusterSnapshot(
            generated_at=self._clock_provider(),
            nodes=nodes,
            applications=applications,
            services=services,
            application_views=tuple(
                ApplicationView(application=application, services=services_by_application[application.name])
                for application in applications
            ),
            node_health_summary=domain_summarize_health(node.health_state for node in nodes),
            application_health_summary=domain_summarize_health(
                application.health_state for application in applications
            ),
            service_health_summary=domain_summarize_health(service.health_state for service in services),
            cluster_health=cluster_health_result.value,
            cluster_runtime_version=self._snapshot_runtime_version(),
            current_node=self._snapshot_current_node(nodes, environment),
            environment=environment,
            query_failures=tuple(query_failures),
        )

    def _snapshot_collect_services(self, applications, query_failures: list[QueryFailure]) -> tuple[ServiceInfo, ...]:
        """Query services application by application and concatenate the results.

        Stops issuing further queries once shutdown has been signalled.
        """

        services: list[ServiceInfo] = []
        for application in applications:
            if self._cancellation_event.is_set():
                self._event_sink.info("Shutdown requested, skipping remaining service queries")
                break
            services_result = self._query_client.query_services(application.name)
            self._snapshot_record_failure(f"services:{application.name}", services_result, query_failures)
            services.extend(services_result.value)
        return tuple(services)

    def _snapshot_current_node(self, nodes, environment: EnvironmentFacts) -> CurrentNodeView:
        lookup = domain_resolve_current_node(nodes, self._identity.node_name)
        return CurrentNodeView(
            name=lookup.node.name if lookup.node is not None else environment.hostname,
            ip_address=environment.local_ip_address,
            hostname=environment.hostname,
            match_kind=lookup.match_kind,
        )

    def _snapshot_runtime_version(self) -> str:
        if self._query_client.query_limited_mode():
            return LIMITED_MODE_RUNTIME_VERSION
        return self._cluster_runtime_version

    def _snapshot_record_failure(
        self,
        query_name: str,
        query_result: QueryResult,
        query_failures: list[QueryFailure],
    ) -> None:
        if query_result.ok:
            return
        failure = QueryFailure(
            query_name=query_name,
            error_kind=query_result.error_kind.value,
            detail=query_result.detail,
        )
        query_failures.append(failure)
        # Limited mode is reported once at startup.
        if self._query_client.query_limited_mode():
            return
        self._event_sink.error(f"Cluster query degraded: {failure.query_name} ({failure.error_kind}): {failure.detail}")
