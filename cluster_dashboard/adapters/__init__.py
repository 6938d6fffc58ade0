"""Adapter layer package for cluster API integration boundaries."""

from .fabric_rest_client import ServiceFabricRestClient, adapter_application_id
from .interfaces import ClusterQueryPort, QueryErrorKind, QueryResult
from .limited_mode import LimitedModeClusterQueryClient
from .query_errors import ClusterPayloadError, adapter_classify_query_error

__all__ = [
	"ClusterPayloadError",
	"ClusterQueryPort",
	"LimitedModeClusterQueryClient",
	"QueryErrorKind",
	"QueryResult",
	"ServiceFabricRestClient",
	"adapter_application_id",
	"adapter_classify_query_error",
]
