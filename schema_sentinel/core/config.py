"""
Application Configuration

Settings class using pydantic-settings for environment variable loading.
Defines baseline locations, live endpoints and drift policies.
"""

from functools import lru_cache
from typing import Literal, Optional, get_args

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS = get_args(LogLevel)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables prefixed with
    SENTINEL_ (e.g. SENTINEL_REPORT_DIR). The two live endpoints also accept
    their historical names APP2_STAGING_URL and INTEGRATION_LAYER_URL.
    """

    model_config = SettingsConfigDict(
        env_prefix="SENTINEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Local baselines
    contracts_root: str = Field(
        default=".",
        description="Root directory that relative baseline paths resolve against",
    )
    wsdl_path: str = Field(
        default="contracts/wsdl/order-service.wsdl",
        description="Stored WSDL baseline for the order service",
    )
    message_schemas_dir: str = Field(
        default="contracts/messages",
        description="Directory holding the stored JSON message schemas",
    )
    order_created_schema: str = Field(
        default="contracts/messages/order-created-event.schema.json",
        description="Stored baseline for the order-created message schema",
    )

    # Reports
    report_dir: str = Field(default="reports/drift", description="Drift report output directory")

    # Live endpoints
    app2_staging_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SENTINEL_APP2_STAGING_URL", "APP2_STAGING_URL"),
        description="Base URL of the SOAP order service staging environment",
    )
    wsdl_endpoint_path: str = Field(default="/ws/orders?wsdl")
    integration_layer_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "SENTINEL_INTEGRATION_LAYER_URL", "INTEGRATION_LAYER_URL"
        ),
        description="Base URL of the integration layer publishing message schemas",
    )
    message_schema_endpoint_path: str = Field(default="/api/schemas/order-events")
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every live fetch",
    )

    # Policies
    strict_soap: bool = Field(
        default=False,
        description="Treat unexpected SOAP body elements as validation failures",
    )
    drift_policy: Literal["symmetric", "breaking"] = Field(
        default="symmetric",
        description="'symmetric' flags additions and removals, 'breaking' only removals",
    )

    log_level: LogLevel = Field(default="INFO", description="Root logging level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def live_wsdl_url(self) -> Optional[str]:
        """Full live WSDL URL, or None when the staging URL is not set."""
        if not self.app2_staging_url:
            return None
        return f"{self.app2_staging_url.rstrip('/')}{self.wsdl_endpoint_path}"

    @property
    def live_message_schema_url(self) -> Optional[str]:
        """Full live message schema URL, or None when the integration layer URL is not set."""
        if not self.integration_layer_url:
            return None
        return f"{self.integration_layer_url.rstrip('/')}{self.message_schema_endpoint_path}"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Application settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.wsdl_path)
        contracts/wsdl/order-service.wsdl
    """
    return Settings()
