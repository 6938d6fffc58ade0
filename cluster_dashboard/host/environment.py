"""Process and machine environment lookups for dashboard rendering."""

from __future__ import annotations

import os
import platform
import socket
import time
from typing import Callable, Final

from cluster_dashboard.domain import EnvironmentFacts

LOOPBACK_ADDRESS: Final[str] = "127.0.0.1"
_BYTES_PER_GIB: Final[float] = 1024.0 * 1024.0 * 1024.0
_PROCESS_STARTED_MONOTONIC: Final[float] = time.monotonic()


def host_collect_environment_facts(monotonic_clock: Callable[[], float] = time.monotonic) -> EnvironmentFacts:
    """Capture environment facts for one render.

    Every lookup falls back to a neutral value instead of raising.

    Args:
        monotonic_clock: Clock used to compute process uptime.

    Returns:
        EnvironmentFacts: Hostname, address, runtime, OS and resource facts.
    """

    hostname = socket.gethostname()
    return EnvironmentFacts(
        hostname=hostname,
        local_ip_address=host_local_ip_address(hostname),
        runtime_version=f"{platform.python_implementation()} {platform.python_version()}",
        os_description=platform.platform(terse=True) or platform.system() or "Unknown",
        cpu_cores=os.cpu_count() or 1,
        total_memory_gb=host_total_memory_gb(),
        uptime_seconds=max(0.0, monotonic_clock() - _PROCESS_STARTED_MONOTONIC),
    )


def host_local_ip_address(hostname: str | None = None) -> str:
    """Return the first IPv4 address of the local host, or loopback.

    Args:
        hostname: Optional host name, defaults to the local machine name.

    Returns:
        str: Dotted IPv4 address.
    """

    try:
        _, _, addresses = socket.gethostbyname_ex(hostname or socket.gethostname())
    except OSError:
        return LOOPBACK_ADDRESS
    return addresses[0] if addresses else LOOPBACK_ADDRESS


def host_total_memory_gb() -> float | None:
    """Return physical memory in GiB, or None where the platform hides it."""

    sysconf = getattr(os, "sysconf", None)
    if sysconf is None:
        return None
    try:
        total_bytes = sysconf("SC_PAGE_SIZE") * sysconf("SC_PHYS_PAGES")
    except (ValueError, OSError):
        return None
    if total_bytes <= 0:
        return None
    return total_bytes / _BYTES_PER_GIB


def host_format_uptime(uptime_seconds: float) -> str:
    """Format seconds as `1d 02h 03m 04s`."""

    remaining_seconds = int(max(0.0, uptime_seconds))
    days, remaining_seconds = divmod(remaining_seconds, 86400)
    hours, remaining_seconds = divmod(remaining_seconds, 3600)
    minutes, seconds = divmod(remaining_seconds, 60)
    return f"{days}d {hours:02d}h {minutes:02d}m {seconds:02d}s"
