"""Typed runtime settings with dotenv support and startup validation."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the dashboard listener and cluster queries.

    Environment variable names map directly to field names in uppercase.
    Example: `cluster_api_url` reads from `CLUSTER_API_URL`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for listener binding.
        application_port: Fallback listener port when the named endpoint is unavailable.
        endpoint_name: Named endpoint resource published by the hosting runtime.
        advertised_host: Host name used in the published listener address.
        listener_startup_timeout_seconds: Maximum wait for the listener to accept connections.
        listener_shutdown_grace_seconds: Maximum wait for in-flight requests on shutdown.
        cluster_api_url: Cluster management REST endpoint. Blank enables limited mode.
        cluster_api_version: REST `api-version` query value.
        cluster_api_timeout_seconds: Per-request timeout for cluster queries.
        cluster_api_client_cert_path: Optional client certificate for secured clusters.
        cluster_api_client_key_path: Optional client certificate key.
        cluster_api_verify_tls: Whether to verify the cluster TLS certificate.
        cluster_runtime_version: Cluster runtime version shown on the dashboard.
        explorer_url: External cluster explorer URL.
        department_name: Department label shown in page headers.
        cluster_display_name: Cluster label shown in page headers.
        dashboard_refresh_seconds: Client-side dashboard auto-refresh interval.
        service_name: Default service name for host identity.
        application_name: Default application name for host identity.
        application_type_name: Default application type name for host identity.
        service_version: Version string reported by the health endpoint.
        node_name: Optional node name override for host identity.
        instance_id: Optional instance id override for host identity.
        log_level: Root log level for the `cluster_dashboard` logger.
        log_json: Emit structured JSON log lines instead of text.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8081, ge=0, le=65535)
    endpoint_name: str = Field(default="ServiceEndpoint", min_length=1)
    advertised_host: str = Field(default="localhost", min_length=1)
    listener_startup_timeout_seconds: float = Field(default=10.0, gt=0)
    listener_shutdown_grace_seconds: float = Field(default=5.0, ge=0)
    cluster_api_url: str = Field(default="http://localhost:19080")
    cluster_api_version: str = Field(default="6.0", min_length=1)
    cluster_api_timeout_seconds: float = Field(default=10.0, gt=0)
    cluster_api_client_cert_path: str | None = Field(default=None)
    cluster_api_client_key_path: str | None = Field(default=None)
    cluster_api_verify_tls: bool = Field(default=True)
    cluster_runtime_version: str = Field(default="Unknown", min_length=1)
    explorer_url: str = Field(default="http://localhost:19080", min_length=1)
    department_name: str = Field(default="Internal Department Name", min_length=1)
    cluster_display_name: str = Field(default="Service Fabric Cluster", min_length=1)
    dashboard_refresh_seconds: int = Field(default=30, ge=5)
    service_name: str = Field(default="fabric:/ClusterDashboardApp/ClusterDashboard", min_length=1)
    application_name: str = Field(default="fabric:/ClusterDashboardApp", min_length=1)
    application_type_name: str = Field(default="ClusterDashboardAppType", min_length=1)
    service_version: str = Field(default="1.0.0", min_length=1)
    node_name: str | None = Field(default=None)
    instance_id: str | None = Field(default=None)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @field_validator(
        "endpoint_name",
        "advertised_host",
        "cluster_api_version",
        "cluster_runtime_version",
        "service_name",
        "application_name",
        "application_type_name",
        "service_version",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("cluster_api_url", "explorer_url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("node_name", "instance_id", "cluster_api_client_cert_path", "cluster_api_client_key_path")
    @classmethod
    def _normalize_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized_value), int):
            raise ValueError(f"unsupported log level: {value}")
        return normalized_value

    @field_validator("cluster_api_client_key_path")
    @classmethod
    def _validate_client_key_requires_cert(cls, value: str | None, info) -> str | None:
        if value is not None and info.data.get("cluster_api_client_cert_path") is None:
            raise ValueError("cluster_api_client_key_path requires cluster_api_client_cert_path")
        return value

    def settings_limited_mode(self) -> bool:
        """Return whether no cluster API endpoint is configured.

        Returns:
            bool: True when cluster queries must run in limited mode.
        """

        return not self.cluster_api_url


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
