"""
Application configuration and environment variables.

This module unifies configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

Naming convention:
- In Python code: snake_case (local_storage_path)
- In .env or ENV vars: COURIER_ prefixed UPPER_CASE (COURIER_LOCAL_STORAGE_PATH)
- Pydantic automatically converts between both
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVER_MODES = ("debug", "release", "test")


class ConfigurationError(ValueError):
    """Raised when the configuration is invalid."""


class Settings(BaseSettings):
    """
    Unified courier configuration.

    Exactly one storage backend (local or GCP secret manager) must be enabled
    unless the server is started in maintenance mode.

    Example:
        # In .env or as environment variables:
        COURIER_BIND_ADDR=:8842
        COURIER_LOCAL_STORAGE_ENABLED=true
        COURIER_LOCAL_STORAGE_PATH=/data/courier
    """

    model_config = SettingsConfigDict(
        env_prefix="COURIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================================
    # SERVER SETTINGS
    # ============================================================================
    maintenance: bool = Field(
        default=False, description="Starts the server in maintenance mode"
    )
    bind_addr: str = Field(
        default=":8842", description="IP address and port of the server"
    )
    mode: str = Field(default="release", description="Either debug, release or test")

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    console_log: bool = Field(
        default=False,
        description="Set for human readable logs (otherwise json logs)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | trace_id={extra[trace_id]} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format for console logs",
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # MTLS SETTINGS
    # ============================================================================
    mtls_insecure: bool = Field(
        default=True, description="Set to false to enable TLS configuration"
    )
    mtls_cert_path: str = Field(
        default="", description="The certificate chain and private key of the server"
    )
    mtls_pool_path: str = Field(
        default="", description="The cert pool to validate clients for mTLS"
    )

    # ============================================================================
    # STORAGE SETTINGS
    # ============================================================================
    local_storage_enabled: bool = Field(
        default=False, description="Set to true to enable local storage"
    )
    local_storage_path: str = Field(
        default="",
        description="Path to the directory to store certs and passwords",
    )

    gcp_secret_manager_enabled: bool = Field(
        default=False, description="Set to true to enable GCP secret manager"
    )
    gcp_secret_manager_credentials: str = Field(
        default="",
        description="Path to json file with gcp service account credentials",
    )
    gcp_secret_manager_project: str = Field(
        default="",
        description="Name of gcp project to use with secret manager",
    )

    # ============================================================================
    # OBSERVABILITY SETTINGS (OpenTelemetry)
    # ============================================================================
    otel_enabled: bool = Field(default=False, description="Enable OpenTelemetry")
    otel_service_name: str = Field(
        default="courier",
        description="Service name for OpenTelemetry",
    )
    otel_exporter_otlp_endpoint: str = Field(
        default="",
        description="OpenTelemetry collector endpoint (console exporter when empty)",
    )

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def validate_config(self) -> None:
        """
        Validate the configuration as a whole.

        Raises:
            ConfigurationError: If the configuration is incomplete or conflicting
        """
        if not self.bind_addr:
            raise ConfigurationError("invalid configuration: missing bindaddr")

        if not self.mode:
            raise ConfigurationError(
                "invalid configuration: missing server mode (debug, release, test)"
            )

        if self.mode not in SERVER_MODES:
            raise ConfigurationError(
                f"invalid configuration: unknown server mode {self.mode!r}"
            )

        if not self.mtls_insecure and (
            not self.mtls_cert_path or not self.mtls_pool_path
        ):
            raise ConfigurationError(
                "invalid configuration: missing cert path or pool path"
            )

        if not self.local_storage_enabled and not self.gcp_secret_manager_enabled:
            raise ConfigurationError(
                "invalid configuration: must enable either local storage "
                "or secret manager storage"
            )

        if self.local_storage_enabled and self.gcp_secret_manager_enabled:
            raise ConfigurationError(
                "invalid configuration: cannot enable both local storage "
                "and secret manager storage"
            )

        if self.local_storage_enabled and not self.local_storage_path:
            raise ConfigurationError(
                "invalid configuration: missing path for local storage"
            )

        if self.gcp_secret_manager_enabled:
            if not self.gcp_secret_manager_credentials:
                raise ConfigurationError(
                    "invalid configuration: missing credentials for secret manager storage"
                )
            if not self.gcp_secret_manager_project:
                raise ConfigurationError(
                    "invalid configuration: missing project name for secret manager storage"
                )

    def get_bind_host_port(self) -> tuple[str, int]:
        """
        Split the bind address into a host and port for uvicorn.

        Returns:
            tuple[str, int]: Host (0.0.0.0 when omitted) and port.
        """
        host, _, port = self.bind_addr.rpartition(":")
        if not port.isdigit():
            raise ConfigurationError(
                f"invalid configuration: cannot parse port from {self.bind_addr!r}"
            )
        return host or "0.0.0.0", int(port)


# ============================================================================
# SINGLETON PATTERN - Global settings instance
# ============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application configuration instance.
    """
    return Settings()


settings = get_settings()
