"""Service Fabric cluster management REST client for read-only dashboard queries."""

from __future__ import annotations

import ssl
from typing import Any, Callable, Final, TypeVar
from urllib.parse import quote

import httpx

from cluster_dashboard.domain import (
    APPLICATION_NAME_SCHEME,
    ApplicationInfo,
    CurrentNodeLookup,
    HealthState,
    NodeInfo,
    NodeMatchKind,
    NodeStatus,
    ServiceInfo,
    ServiceKind,
    domain_resolve_current_node,
)

from .interfaces import ClusterQueryPort, QueryErrorKind, QueryResult
from .query_errors import QUERY_SOFT_FAILURE_ERRORS, ClusterPayloadError, adapter_classify_query_error

ValueT = TypeVar("ValueT")


class ServiceFabricRestClient(ClusterQueryPort):
    """Cluster query adapter over the Service Fabric management REST API.

    A short-lived `httpx.Client` is opened per query so the adapter holds no
    connection state between requests and can be shared across threads.
    """

    _USER_AGENT: Final[str] = "cluster-dashboard/1.0 (Python/httpx)"
    _NODES_PATH: Final[str] = "/Nodes"
    _APPLICATIONS_PATH: Final[str] = "/Applications"
    _CLUSTER_HEALTH_PATH: Final[str] = "/$/GetClusterHealth"

    def __init__(
        self,
        base_url: str,
        api_version: str = "6.0",
        timeout_seconds: float = 10.0,
        client_cert_path: str | None = None,
        client_key_path: str | None = None,
        verify_tls: bool = True,
        max_pages: int = 100,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST client.

        Args:
            base_url: Cluster management endpoint, for example `http://localhost:19080`.
            api_version: REST `api-version` query value.
            timeout_seconds: Per-request timeout in seconds.
            client_cert_path: Optional PEM client certificate for secured clusters.
            client_key_path: Optional PEM key for the client certificate.
            verify_tls: Whether to verify the cluster server certificate.
            max_pages: Upper bound on continuation-token pages per list query.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        normalized_api_version = api_version.strip()

        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if not normalized_api_version:
            raise ValueError("api_version must not be blank")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        if client_key_path is not None and client_cert_path is None:
            raise ValueError("client_key_path requires client_cert_path")

        self._base_url = normalized_base_url.rstrip("/")
        self._api_version = normalized_api_version
        self._timeout_seconds = timeout_seconds
        self._client_cert_path = client_cert_path
        self._client_key_path = client_key_path
        self._verify_tls = verify_tls
        self._max_pages = max_pages
        self._transport = transport

    def query_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier including the target endpoint.
        """

        return f"service_fabric_rest:{self._base_url}"

    def query_limited_mode(self) -> bool:
        """Return False; this adapter talks to a configured cluster."""

        return False

    def query_nodes(self) -> QueryResult[tuple[NodeInfo, ...]]:
        """List cluster nodes.

        Returns:
            QueryResult[tuple[NodeInfo, ...]]: Nodes, empty on failure.
        """

        return self._adapter_run_query(
            query_name="nodes",
            operation=lambda client: tuple(
                self._adapter_parse_node(item) for item in self._adapter_get_items(client, self._NODES_PATH)
            ),
            fallback_value=(),
        )

    def query_applications(self) -> QueryResult[tuple[ApplicationInfo, ...]]:
        """List deployed applications.

        Returns:
            QueryResult[tuple[ApplicationInfo, ...]]: Applications, empty on failure.
        """

        return self._adapter_run_query(
            query_name="applications",
            operation=lambda client: tuple(
                self._adapter_parse_application(item)
                for item in self._adapter_get_items(client, self._APPLICATIONS_PATH)
            ),
            fallback_value=(),
        )

    def query_services(self, application_name: str) -> QueryResult[tuple[ServiceInfo, ...]]:
        """List services of one application.

        Args:
            application_name: Fully qualified application name.

        Returns:
            QueryResult[tuple[ServiceInfo, ...]]: Services, empty on failure.
        """

        def _operation(client: httpx.Client) -> tuple[ServiceInfo, ...]:
            services_path = f"/Applications/{adapter_application_id(application_name)}/$/GetServices"
            return tuple(self._adapter_parse_service(item) for item in self._adapter_get_items(client, services_path))

        return self._adapter_run_query(
            query_name=f"services:{application_name}",
            operation=_operation,
            fallback_value=(),
        )

    def query_current_node(self, self_node_name: str | None) -> QueryResult[CurrentNodeLookup]:
        """Resolve the node hosting this instance from the node list.

        Args:
            self_node_name: Node name from the host identity.

        Returns:
            QueryResult[CurrentNodeLookup]: Lookup outcome, `NOT_FOUND` when the
            node list is empty or could not be fetched.
        """

        nodes_result = self.query_nodes()
        lookup = domain_resolve_current_node(nodes_result.value, self_node_name)
        if nodes_result.ok:
            return QueryResult.success(lookup)
        return QueryResult.failure(
            CurrentNodeLookup(match_kind=NodeMatchKind.NOT_FOUND),
            nodes_result.error_kind,
            nodes_result.detail,
        )

    def query_cluster_health(self) -> QueryResult[HealthState]:
        """Return aggregated cluster health.

        Returns:
            QueryResult[HealthState]: Aggregated health, `UNKNOWN` on failure.
        """

        def _operation(client: httpx.Client) -> HealthState:
            payload = self._adapter_get_json(client, self._CLUSTER_HEALTH_PATH, {})
            return HealthState.from_wire(payload.get("AggregatedHealthState"))

        return self._adapter_run_query(
            query_name="cluster_health",
            operation=_operation,
            fallback_value=HealthState.UNKNOWN,
        )

    def _adapter_run_query(
        self,
        query_name: str,
        operation: Callable[[httpx.Client], ValueT],
        fallback_value: ValueT,
    ) -> QueryResult[ValueT]:
        """Execute one query operation and absorb upstream failures.

        Args:
            query_name: Query label used in failure details.
            operation: Callable issuing requests through the provided client.
            fallback_value: Value returned when the query fails.

        Returns:
            QueryResult[ValueT]: Operation value or classified failure.
        """

        try:
            with self._adapter_create_client() as client:
                return QueryResult.success(operation(client))
        except QUERY_SOFT_FAILURE_ERRORS as error:
            return QueryResult.failure(
                fallback_value,
                adapter_classify_query_error(error),
                f"{query_name} query failed: {type(error).__name__}: {error}",
            )
        except Exception as error:
            # Unclassified upstream failures still degrade to an empty section.
            return QueryResult.failure(
                fallback_value,
                QueryErrorKind.UNKNOWN,
                f"{query_name} query failed unexpectedly: {type(error).__name__}: {error}",
            )

    def _adapter_create_client(self) -> httpx.Client:
        """Create one configured httpx client.

        Returns:
            httpx.Client: Client bound to the cluster base URL.

        Raises:
            OSError: Raised when client certificate files cannot be loaded.
        """

        return httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            verify=self._adapter_build_tls_verify(),
            headers={"User-Agent": self._USER_AGENT, "Accept": "application/json"},
            transport=self._transport,
        )

    def _adapter_build_tls_verify(self) -> ssl.SSLContext | bool:
        """Return the httpx `verify` value for the configured TLS options."""

        if self._client_cert_path is None:
            return self._verify_tls

        tls_context = ssl.create_default_context()
        if not self._verify_tls:
            tls_context.check_hostname = False
            tls_context.verify_mode = ssl.CERT_NONE
        tls_context.load_cert_chain(certfile=self._client_cert_path, keyfile=self._client_key_path)
        return tls_context

    def _adapter_get_json(self, client: httpx.Client, path: str, extra_parameters: dict[str, str]) -> dict[str, Any]:
        """Execute one GET and return the decoded JSON object.

        Args:
            client: Open httpx client.
            path: Path relative to the cluster base URL.
            extra_parameters: Query parameters in addition to `api-version`.

        Returns:
            dict[str, Any]: Decoded JSON object.

        Raises:
            httpx.HTTPError: Raised for transport failures and non-success status codes.
            ClusterPayloadError: Raised when the body is not a JSON object.
        """

        response = client.get(path, params={"api-version": self._api_version, **extra_parameters})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ClusterPayloadError(f"expected JSON object from {path}")
        return payload

    def _adapter_get_items(self, client: httpx.Client, path: str) -> list[dict[str, Any]]:
        """Collect list items across continuation-token pages.

        Args:
            client: Open httpx client.
            path: List endpoint path.

        Returns:
            list[dict[str, Any]]: Raw item payloads in upstream order.

        Raises:
            httpx.HTTPError: Raised for transport failures and non-success status codes.
            ClusterPayloadError: Raised for malformed pages or runaway paging.
        """

        items: list[dict[str, Any]] = []
        continuation_token = ""
        for _ in range(self._max_pages):
            extra_parameters = {"ContinuationToken": continuation_token} if continuation_token else {}
            payload = self._adapter_get_json(client, path, extra_parameters)
            page_items = payload.get("Items", [])
            if not isinstance(page_items, list):
                raise ClusterPayloadError(f"expected Items list from {path}")
            items.extend(page_items)
            continuation_token = str(payload.get("ContinuationToken") or "")
            if not continuation_token:
                return items
        raise ClusterPayloadError(f"{path} paging exceeded {self._max_pages} pages")

    def _adapter_parse_node(self, item: dict[str, Any]) -> NodeInfo:
        return NodeInfo(
            name=str(item["Name"]),
            ip_address_or_fqdn=str(item.get("IpAddressOrFQDN") or ""),
            status=NodeStatus.from_wire(item.get("NodeStatus")),
            health_state=HealthState.from_wire(item.get("HealthState")),
            fault_domain=_adapter_optional_text(item.get("FaultDomain")),
            upgrade_domain=_adapter_optional_text(item.get("UpgradeDomain")),
        )

    def _adapter_parse_application(self, item: dict[str, Any]) -> ApplicationInfo:
        return ApplicationInfo(
            name=str(item["Name"]),
            type_name=str(item.get("TypeName") or ""),
            type_version=str(item.get("TypeVersion") or ""),
            health_state=HealthState.from_wire(item.get("HealthState")),
        )

    def _adapter_parse_service(self, item: dict[str, Any]) -> ServiceInfo:
        return ServiceInfo(
            name=str(item["Name"]),
            kind=ServiceKind.from_wire(item.get("ServiceKind")),
            type_name=str(item.get("TypeName") or ""),
            health_state=HealthState.from_wire(item.get("HealthState")),
        )


def adapter_application_id(application_name: str) -> str:
    """Convert an application name to its REST path identifier.

    `fabric:/App1/Nested` becomes `App1~Nested`.

    Args:
        application_name: Fully qualified application name.

    Returns:
        str: URL-quoted application identifier.

    Raises:
        ValueError: Raised when the application name is blank.
    """

    normalized_name = application_name.strip()
    if normalized_name.startswith(APPLICATION_NAME_SCHEME):
        normalized_name = normalized_name[len(APPLICATION_NAME_SCHEME):]
    normalized_name = normalized_name.strip("/")
    if not normalized_name:
        raise ValueError("application_name must not be blank")
    return quote(normalized_name.replace("/", "~"), safe="~")


def _adapter_optional_text(value: object) -> str | None:
    text_value = str(value).strip() if value is not None else ""
    return text_value or None
