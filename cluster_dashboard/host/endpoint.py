"""Listener port resolution from named endpoint resources."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

ENDPOINT_ENVIRONMENT_PREFIX: Final[str] = "Fabric_Endpoint_"


@dataclass(frozen=True)
class EndpointPortResolution:
    """Resolved listener port and where it came from.

    Attributes:
        port: Port to bind.
        from_endpoint: True when the port came from the named endpoint.
        detail: Diagnostic message describing the resolution.
    """

    port: int
    from_endpoint: bool
    detail: str


def host_resolve_endpoint_port(
    endpoint_name: str,
    default_port: int,
    environ: Mapping[str, str] | None = None,
) -> EndpointPortResolution:
    """Resolve the listener port from a named endpoint, falling back to a default.

    The hosting runtime publishes each endpoint resource as a
    `Fabric_Endpoint_<name>` environment variable holding the port number.

    Args:
        endpoint_name: Endpoint resource name, for example `ServiceEndpoint`.
        default_port: Port used when the endpoint lookup fails.
        environ: Optional environment mapping, defaults to `os.environ`.

    Returns:
        EndpointPortResolution: Port with resolution diagnostics.
    """

    source_environ = os.environ if environ is None else environ
    variable_name = f"{ENDPOINT_ENVIRONMENT_PREFIX}{endpoint_name}"
    raw_port = (source_environ.get(variable_name) or "").strip()
    if not raw_port:
        return EndpointPortResolution(
            port=default_port,
            from_endpoint=False,
            detail=f"Could not get endpoint port from {variable_name}, using default {default_port}",
        )

    try:
        port = int(raw_port)
    except ValueError:
        return EndpointPortResolution(
            port=default_port,
            from_endpoint=False,
            detail=f"Endpoint {variable_name} has non-numeric port {raw_port!r}, using default {default_port}",
        )

    if not 0 < port <= 65535:
        return EndpointPortResolution(
            port=default_port,
            from_endpoint=False,
            detail=f"Endpoint {variable_name} port {port} is out of range, using default {default_port}",
        )
    return EndpointPortResolution(port=port, from_endpoint=True, detail=f"Got port from endpoint: {port}")
