"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass

from fastapi import FastAPI

from cluster_dashboard.adapters import ClusterQueryPort, LimitedModeClusterQueryClient, ServiceFabricRestClient
from cluster_dashboard.api import DashboardRequestRouter, create_api_application
from cluster_dashboard.config import AppSettings
from cluster_dashboard.dashboard import ClusterSnapshotService, PageContext
from cluster_dashboard.domain import HostIdentity
from cluster_dashboard.host import host_resolve_identity
from cluster_dashboard.observability import EventSinkPort, LoggingEventSink
from cluster_dashboard.server import DashboardListenerLoop, HttpCommunicationListener


@dataclass(frozen=True)
class DashboardRuntime:
    """Wired runtime components for one dashboard process.

    Attributes:
        settings: Validated application settings.
        event_sink: Process-wide event sink.
        cancellation_event: Process-wide shutdown signal.
        identity: Identity of this dashboard instance.
        snapshot_service: Cluster snapshot builder.
        application: FastAPI application serving the dashboard.
        communication_listener: Host lifecycle adapter for the listener.
    """

    settings: AppSettings
    event_sink: EventSinkPort
    cancellation_event: threading.Event
    identity: HostIdentity
    snapshot_service: ClusterSnapshotService
    application: FastAPI
    communication_listener: HttpCommunicationListener


def bootstrap_create_query_client(settings: AppSettings, event_sink: EventSinkPort) -> ClusterQueryPort:
    """Create the cluster query adapter, degrading to limited mode.

    Args:
        settings: Validated application settings.
        event_sink: Sink receiving the limited-mode notice.

    Returns:
        ClusterQueryPort: REST adapter, or limited-mode adapter when no
        endpoint is configured or the adapter cannot be created.
    """

    if settings.settings_limited_mode():
        reason = "cluster API endpoint is not configured"
        event_sink.info(f"Running in limited mode: {reason}")
        return LimitedModeClusterQueryClient(reason=reason)

    try:
        return ServiceFabricRestClient(
            base_url=settings.cluster_api_url,
            api_version=settings.cluster_api_version,
            timeout_seconds=settings.cluster_api_timeout_seconds,
            client_cert_path=settings.cluster_api_client_cert_path,
            client_key_path=settings.cluster_api_client_key_path,
            verify_tls=settings.cluster_api_verify_tls,
        )
    except ValueError as error:
        event_sink.error(f"Cluster client creation failed, running in limited mode: {error}")
        return LimitedModeClusterQueryClient(reason=str(error))


def bootstrap_create_page_context(settings: AppSettings) -> PageContext:
    """Build static page settings from application settings."""

    return PageContext(
        department_name=settings.department_name,
        cluster_display_name=settings.cluster_display_name,
        dashboard_refresh_seconds=settings.dashboard_refresh_seconds,
        explorer_url=settings.explorer_url,
    )


def bootstrap_create_runtime(
    settings: AppSettings,
    event_sink: EventSinkPort | None = None,
    query_client: ClusterQueryPort | None = None,
    environ: Mapping[str, str] | None = None,
) -> DashboardRuntime:
    """Assemble every runtime component around one event sink and one cancellation event.

    Args:
        settings: Validated application settings.
        event_sink: Optional sink override, defaults to `LoggingEventSink`.
        query_client: Optional query adapter override.
        environ: Optional environment mapping for identity and endpoint lookup.

    Returns:
        DashboardRuntime: Wired runtime components, listener not yet opened.
    """

    resolved_event_sink = event_sink or LoggingEventSink()
    cancellation_event = threading.Event()
    identity = host_resolve_identity(settings, environ)
    snapshot_service = ClusterSnapshotService(
        query_client=query_client or bootstrap_create_query_client(settings, resolved_event_sink),
        identity=identity,
        event_sink=resolved_event_sink,
        cluster_runtime_version=settings.cluster_runtime_version,
        cancellation_event=cancellation_event,
    )
    router = DashboardRequestRouter(
        snapshot_service=snapshot_service,
        identity=identity,
        page_context=bootstrap_create_page_context(settings),
        event_sink=resolved_event_sink,
    )
    application = create_api_application(router)
    listener_loop = DashboardListenerLoop(
        application=application,
        event_sink=resolved_event_sink,
        cancellation_event=cancellation_event,
        host=settings.application_host,
        advertised_host=settings.advertised_host,
        startup_timeout_seconds=settings.listener_startup_timeout_seconds,
        shutdown_grace_seconds=settings.listener_shutdown_grace_seconds,
    )
    communication_listener = HttpCommunicationListener(
        listener_loop=listener_loop,
        event_sink=resolved_event_sink,
        endpoint_name=settings.endpoint_name,
        default_port=settings.application_port,
        environ=environ,
    )
    return DashboardRuntime(
        settings=settings,
        event_sink=resolved_event_sink,
        cancellation_event=cancellation_event,
        identity=identity,
        snapshot_service=snapshot_service,
        application=application,
        communication_listener=communication_listener,
    )
