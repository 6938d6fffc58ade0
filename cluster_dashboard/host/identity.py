"""Host identity resolution for the running dashboard instance."""

from __future__ import annotations

import os
import socket
from collections.abc import Mapping

from cluster_dashboard.config import AppSettings
from cluster_dashboard.domain import HostIdentity


def host_resolve_identity(settings: AppSettings, environ: Mapping[str, str] | None = None) -> HostIdentity:
    """Build the instance identity from runtime environment and settings.

    Resolution order per field: runtime-provided environment variable, then
    the configured setting, then a process-level fallback (machine name for
    the node, process id for the instance id).

    Args:
        settings: Validated application settings.
        environ: Optional environment mapping, defaults to `os.environ`.

    Returns:
        HostIdentity: Identity used by health, test and dashboard pages.
    """

    source_environ = os.environ if environ is None else environ
    node_name = (
        _host_environment_value(source_environ, "Fabric_NodeName")
        or settings.node_name
        or socket.gethostname()
    )
    application_name = _host_environment_value(source_environ, "Fabric_ApplicationName") or settings.application_name
    instance_id = settings.instance_id or str(os.getpid())

    return HostIdentity(
        service_name=settings.service_name,
        node_name=node_name,
        instance_id=instance_id,
        application_name=application_name,
        application_type_name=settings.application_type_name,
        service_version=settings.service_version,
    )


def _host_environment_value(environ: Mapping[str, str], variable_name: str) -> str | None:
    return (environ.get(variable_name) or "").strip() or None
