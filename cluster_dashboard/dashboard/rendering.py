"""Page rendering from snapshots and identity to HTML or JSON strings.

Rendering is pure: the same inputs always produce the same text, so two
requests against unchanged cluster data differ only in embedded timestamps.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cluster_dashboard.domain import (
    ClusterSnapshot,
    HealthSummaryEntry,
    HostIdentity,
    domain_display_application_name,
    domain_display_service_name,
    domain_health_display_class,
)
from cluster_dashboard.host import host_format_uptime

PAGE_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
HEALTH_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%SZ"
NO_APPLICATIONS_MESSAGE: Final[str] = "No applications found or limited access mode"
NO_NODES_MESSAGE: Final[str] = "No nodes found or limited access mode"
_TEMPLATE_DIRECTORY: Final[Path] = Path(__file__).resolve().parent / "templates"


@dataclass(frozen=True)
class PageContext:
    """Static page settings shared by every template.

    Attributes:
        department_name: Department label in page headers.
        cluster_display_name: Cluster label in page headers.
        dashboard_refresh_seconds: Client-side auto-refresh interval.
        explorer_url: External cluster explorer URL.
        explorer_redirect_delay_seconds: Delay before the explorer opens.
    """

    department_name: str
    cluster_display_name: str
    dashboard_refresh_seconds: int
    explorer_url: str
    explorer_redirect_delay_seconds: int = 3


def _render_format_page_time(value: datetime) -> str:
    return value.strftime(PAGE_TIMESTAMP_FORMAT)


def _render_build_environment() -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIRECTORY)),
        autoescape=select_autoescape(("html",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    environment.filters["health_class"] = domain_health_display_class
    environment.filters["application_display_name"] = domain_display_application_name
    environment.filters["service_display_name"] = domain_display_service_name
    environment.filters["uptime"] = host_format_uptime
    environment.filters["page_time"] = _render_format_page_time
    return environment


_TEMPLATE_ENVIRONMENT: Final[Environment] = _render_build_environment()


def render_home_page(page_context: PageContext, rendered_at: datetime) -> str:
    """Render the home/navigation page.

    Args:
        page_context: Static page settings.
        rendered_at: Local render timestamp.

    Returns:
        str: HTML document.
    """

    return _TEMPLATE_ENVIRONMENT.get_template("home.html").render(page=page_context, rendered_at=rendered_at)


def render_dashboard_page(snapshot: ClusterSnapshot, page_context: PageContext) -> str:
    """Render the full cluster health dashboard.

    Args:
        snapshot: Populated cluster snapshot.
        page_context: Static page settings.

    Returns:
        str: HTML document with auto-refresh script.
    """

    return _TEMPLATE_ENVIRONMENT.get_template("dashboard.html").render(
        page=page_context,
        snapshot=snapshot,
        no_applications_message=NO_APPLICATIONS_MESSAGE,
        no_nodes_message=NO_NODES_MESSAGE,
    )


def render_test_page(identity: HostIdentity, page_context: PageContext, rendered_at: datetime) -> str:
    """Render the self-diagnostic page with identity fields."""

    return _TEMPLATE_ENVIRONMENT.get_template("test.html").render(
        page=page_context,
        identity=identity,
        rendered_at=rendered_at,
    )


def render_explorer_redirect_page(page_context: PageContext) -> str:
    """Render the page that opens the external cluster explorer."""

    return _TEMPLATE_ENVIRONMENT.get_template("explorer_redirect.html").render(page=page_context)


def render_error_page(
    page_name: str,
    error: BaseException,
    stack_trace: str,
    page_context: PageContext,
    rendered_at: datetime,
) -> str:
    """Render an operator-facing error page.

    Args:
        page_name: Name of the page that failed.
        error: Caught exception.
        stack_trace: Formatted traceback text.
        page_context: Static page settings.
        rendered_at: Local render timestamp.

    Returns:
        str: HTML document with error type, message and stack trace.
    """

    return _TEMPLATE_ENVIRONMENT.get_template("error.html").render(
        page=page_context,
        page_name=page_name,
        error_type=type(error).__name__,
        error_message=str(error),
        stack_trace=stack_trace,
        rendered_at=rendered_at,
    )


def render_health_payload(identity: HostIdentity, generated_at: datetime) -> dict[str, str]:
    """Build the liveness/identity payload.

    Args:
        identity: Identity of this dashboard instance.
        generated_at: Timestamp, converted to UTC.

    Returns:
        dict[str, str]: Payload with the seven identity fields plus status.
    """

    return {
        "status": "healthy",
        "timestamp": _render_format_utc(generated_at),
        "serviceName": identity.service_name,
        "nodeName": identity.node_name,
        "instanceId": identity.instance_id,
        "applicationName": identity.application_name,
        "applicationTypeName": identity.application_type_name,
        "version": identity.service_version,
    }


def render_health_json(identity: HostIdentity, generated_at: datetime) -> str:
    """Render the liveness/identity payload as JSON text."""

    return json.dumps(render_health_payload(identity, generated_at), indent=4)


def render_error_json(error: BaseException, generated_at: datetime) -> str:
    """Render a JSON error body for JSON routes."""

    return json.dumps(
        {
            "status": "error",
            "error": type(error).__name__,
            "message": str(error),
            "timestamp": _render_format_utc(generated_at),
        },
        indent=4,
    )


def render_snapshot_payload(snapshot: ClusterSnapshot) -> dict[str, Any]:
    """Serialize one snapshot to a JSON-compatible payload.

    Args:
        snapshot: Populated cluster snapshot.

    Returns:
        dict[str, Any]: Nested payload mirroring the dashboard sections.
    """

    environment = snapshot.environment
    return {
        "generatedAt": snapshot.generated_at.isoformat(),
        "clusterHealth": snapshot.cluster_health.value,
        "clusterRuntimeVersion": snapshot.cluster_runtime_version,
        "limitedAccess": snapshot.limited_access,
        "currentNode": {
            "name": snapshot.current_node.name,
            "ipAddress": snapshot.current_node.ip_address,
            "hostname": snapshot.current_node.hostname,
            "matchKind": snapshot.current_node.match_kind.value,
        },
        "environment": {
            "hostname": environment.hostname,
            "localIpAddress": environment.local_ip_address,
            "runtimeVersion": environment.runtime_version,
            "osDescription": environment.os_description,
            "cpuCores": environment.cpu_cores,
            "totalMemoryGb": None if environment.total_memory_gb is None else round(environment.total_memory_gb, 1),
            "uptime": host_format_uptime(environment.uptime_seconds),
        },
        "summaries": {
            "nodes": _render_summary_payload(snapshot.node_health_summary),
            "applications": _render_summary_payload(snapshot.application_health_summary),
            "services": _render_summary_payload(snapshot.service_health_summary),
        },
        "applications": [
            {
                "name": view.application.name,
                "typeName": view.application.type_name,
                "typeVersion": view.application.type_version,
                "healthState": view.application.health_state.value,
                "services": [
                    {
                        "name": service.name,
                        "kind": service.kind.value,
                        "typeName": service.type_name,
                        "healthState": service.health_state.value,
                    }
                    for service in view.services
                ],
            }
            for view in snapshot.application_views
        ],
        "nodes": [
            {
                "name": node.name,
                "ipAddressOrFqdn": node.ip_address_or_fqdn,
                "status": node.status.value,
                "healthState": node.health_state.value,
                "faultDomain": node.fault_domain,
                "upgradeDomain": node.upgrade_domain,
            }
            for node in snapshot.nodes
        ],
        "queryFailures": [
            {"query": failure.query_name, "errorKind": failure.error_kind, "detail": failure.detail}
            for failure in snapshot.query_failures
        ],
    }


def render_snapshot_json(snapshot: ClusterSnapshot) -> str:
    """Render one snapshot as indented JSON text."""

    return json.dumps(render_snapshot_payload(snapshot), indent=2)


def _render_summary_payload(summary_entries: tuple[HealthSummaryEntry, ...]) -> list[dict[str, object]]:
    return [{"label": entry.label, "count": entry.count} for entry in summary_entries]


def _render_format_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(HEALTH_TIMESTAMP_FORMAT)
