"""Host package for endpoint, identity and environment lookups."""

from .endpoint import EndpointPortResolution, host_resolve_endpoint_port
from .environment import (
	LOOPBACK_ADDRESS,
	host_collect_environment_facts,
	host_format_uptime,
	host_local_ip_address,
	host_total_memory_gb,
)
from .identity import host_resolve_identity

__all__ = [
	"EndpointPortResolution",
	"LOOPBACK_ADDRESS",
	"host_collect_environment_facts",
	"host_format_uptime",
	"host_local_ip_address",
	"host_resolve_endpoint_port",
	"host_resolve_identity",
	"host_total_memory_gb",
]
