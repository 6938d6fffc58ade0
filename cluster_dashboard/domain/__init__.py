"""Domain models and aggregation helpers used across layer boundaries."""

from .health import (
	APPLICATION_NAME_SCHEME,
	HEALTH_SUMMARY_EMPTY_LABEL,
	domain_associate_services,
	domain_display_application_name,
	domain_display_service_name,
	domain_format_health_summary,
	domain_health_display_category,
	domain_health_display_class,
	domain_resolve_current_node,
	domain_service_belongs_to_application,
	domain_summarize_health,
)
from .models import (
	ApplicationInfo,
	ApplicationView,
	ClusterSnapshot,
	CurrentNodeLookup,
	CurrentNodeView,
	EnvironmentFacts,
	HealthDisplayCategory,
	HealthState,
	HealthSummaryEntry,
	HostIdentity,
	NodeInfo,
	NodeMatchKind,
	NodeStatus,
	QueryFailure,
	ServiceInfo,
	ServiceKind,
)

__all__ = [
	"APPLICATION_NAME_SCHEME",
	"ApplicationInfo",
	"ApplicationView",
	"ClusterSnapshot",
	"CurrentNodeLookup",
	"CurrentNodeView",
	"EnvironmentFacts",
	"HEALTH_SUMMARY_EMPTY_LABEL",
	"HealthDisplayCategory",
	"HealthState",
	"HealthSummaryEntry",
	"HostIdentity",
	"NodeInfo",
	"NodeMatchKind",
	"NodeStatus",
	"QueryFailure",
	"ServiceInfo",
	"ServiceKind",
	"domain_associate_services",
	"domain_display_application_name",
	"domain_display_service_name",
	"domain_format_health_summary",
	"domain_health_display_category",
	"domain_health_display_class",
	"domain_resolve_current_node",
	"domain_service_belongs_to_application",
	"domain_summarize_health",
]
