"""Pure aggregation helpers turning raw cluster lists into display-ready values."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Final

from .models import (
    ApplicationInfo,
    CurrentNodeLookup,
    HealthDisplayCategory,
    HealthState,
    HealthSummaryEntry,
    NodeInfo,
    NodeMatchKind,
    ServiceInfo,
)

APPLICATION_NAME_SCHEME: Final[str] = "fabric:/"
SERVICE_NAME_SEPARATOR: Final[str] = "/"
HEALTH_SUMMARY_EMPTY_LABEL: Final[str] = "No items"

_HEALTH_DISPLAY_CATEGORIES: Final[dict[HealthState, HealthDisplayCategory]] = {
    HealthState.OK: HealthDisplayCategory.OK,
    HealthState.WARNING: HealthDisplayCategory.WARNING,
    HealthState.ERROR: HealthDisplayCategory.ERROR,
    HealthState.UNKNOWN: HealthDisplayCategory.UNKNOWN,
}

# Fixed priority order of summary entries.
_HEALTH_SUMMARY_LABELS: Final[tuple[tuple[HealthDisplayCategory, str], ...]] = (
    (HealthDisplayCategory.OK, "OK"),
    (HealthDisplayCategory.WARNING, "Warning"),
    (HealthDisplayCategory.ERROR, "Error"),
    (HealthDisplayCategory.UNKNOWN, "Unknown"),
)


def domain_health_display_category(health_state: object) -> HealthDisplayCategory:
    """Map any health value to one of the four fixed display categories.

    Args:
        health_state: `HealthState` member, raw wire string or any other value.

    Returns:
        HealthDisplayCategory: Matching category, `UNKNOWN` for anything unrecognized.
    """

    if not isinstance(health_state, HealthState):
        health_state = HealthState.from_wire(health_state)
    return _HEALTH_DISPLAY_CATEGORIES.get(health_state, HealthDisplayCategory.UNKNOWN)


def domain_health_display_class(health_state: object) -> str:
    """Return the CSS class used to render one health value.

    Args:
        health_state: `HealthState` member, raw wire string or any other value.

    Returns:
        str: One of `health-ok`, `health-warning`, `health-error`, `health-unknown`.
    """

    return domain_health_display_category(health_state).css_class


def domain_summarize_health(health_states: Iterable[object]) -> tuple[HealthSummaryEntry, ...]:
    """Count health states into ordered summary entries.

    Entries follow the fixed order OK, Warning, Error, Unknown and only
    non-zero counts are included. Values outside the known set are counted
    as Unknown, so counts always sum to the number of input states.

    Args:
        health_states: Health values of one entity collection.

    Returns:
        tuple[HealthSummaryEntry, ...]: Summary entries, or the single "No items"
        marker when the input is empty.
    """

    category_counts = Counter(domain_health_display_category(health_state) for health_state in health_states)
    if not category_counts:
        return (HealthSummaryEntry(label=HEALTH_SUMMARY_EMPTY_LABEL, count=0, category=None),)

    return tuple(
        HealthSummaryEntry(label=label, count=category_counts[category], category=category)
        for category, label in _HEALTH_SUMMARY_LABELS
        if category_counts[category] > 0
    )


def domain_format_health_summary(summary_entries: Sequence[HealthSummaryEntry]) -> str:
    """Render summary entries as plain text, for example `1 OK 1 Error`."""

    return " ".join(
        entry.label if entry.is_empty_marker else f"{entry.count} {entry.label}" for entry in summary_entries
    )


def domain_service_belongs_to_application(service_name: str, application_name: str) -> bool:
    """Return whether a service name is nested under an application name.

    Args:
        service_name: Fully qualified service name.
        application_name: Fully qualified application name.

    Returns:
        bool: True when the service name starts with the application name and a separator.
    """

    return service_name.startswith(application_name + SERVICE_NAME_SEPARATOR)


def domain_associate_services(
    applications: Sequence[ApplicationInfo],
    services: Sequence[ServiceInfo],
) -> dict[str, tuple[ServiceInfo, ...]]:
    """Group services under their owning applications by name prefix.

    The relation is derived on every call and never stored. Every application
    gets an entry, possibly empty. Services matching no application are left
    out.

    Args:
        applications: Applications of one snapshot.
        services: Services of one snapshot.

    Returns:
        dict[str, tuple[ServiceInfo, ...]]: Services keyed by application name,
        in application order.
    """

    return {
        application.name: tuple(
            service
            for service in services
            if domain_service_belongs_to_application(service.name, application.name)
        )
        for application in applications
    }


def domain_display_application_name(application_name: str) -> str:
    """Strip the `fabric:/` scheme from an application name for display."""

    if application_name.startswith(APPLICATION_NAME_SCHEME):
        return application_name[len(APPLICATION_NAME_SCHEME):]
    return application_name


def domain_display_service_name(service_name: str, application_name: str) -> str:
    """Strip the owning application prefix from a service name for display."""

    application_prefix = application_name + SERVICE_NAME_SEPARATOR
    if service_name.startswith(application_prefix):
        return service_name[len(application_prefix):]
    return domain_display_application_name(service_name)


def domain_resolve_current_node(nodes: Sequence[NodeInfo], self_node_name: str | None) -> CurrentNodeLookup:
    """Find the node hosting this instance among the node list.

    Falls back to the first listed node when no name matches. That fallback
    is a best-effort heuristic: the returned node may not be the local one.

    Args:
        nodes: Node list of one snapshot.
        self_node_name: Node name from the host identity.

    Returns:
        CurrentNodeLookup: Resolution outcome with the node when one was found.
    """

    if self_node_name:
        for node in nodes:
            if node.name == self_node_name:
                return CurrentNodeLookup(match_kind=NodeMatchKind.EXACT, node=node)

    if nodes:
        return CurrentNodeLookup(match_kind=NodeMatchKind.FIRST_AVAILABLE, node=nodes[0])
    return CurrentNodeLookup(match_kind=NodeMatchKind.NOT_FOUND)
