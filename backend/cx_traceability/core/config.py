"""
Application configuration using Pydantic Settings.
All configuration is loaded from environment variables with sensible defaults.
"""

import warnings
from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The configuration hierarchy allows for environment-specific overrides
    while maintaining secure defaults for production deployments.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Core Application Settings
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API Configuration
    api_prefix: str = "/api/traceability"
    project_name: str = "CX Traceability Notifications"
    version: str = "0.1.0"

    # ==========================================================================
    # Service Identity
    # ==========================================================================
    base_url: str = Field(
        default="http://localhost:8080",
        description="Public base URL of this service, announced to the connector",
    )
    api_key: str = Field(
        default="",
        description="API key the connector sends when forwarding notifications",
    )

    # ==========================================================================
    # OpenAPI Contract
    # ==========================================================================
    openapi_spec_url: str = Field(
        default="",
        description="URL (or file path) of the OpenAPI document used for validation",
    )

    # ==========================================================================
    # EDC (Eclipse Dataspace Connector) Configuration
    # ==========================================================================
    edc_management_url: str = Field(
        default="https://cac-testbed-edc.int.catena-x.net/management",
    )
    edc_management_api_key: str = Field(default="")
    edc_setup_on_startup: bool = Field(
        default=False,
        description="Register the traceability offer with the connector during startup",
    )

    @model_validator(mode="after")
    def _validate_production_settings(self) -> Self:
        """Enforce settings the service cannot run without outside development."""
        if self.environment in ("production", "staging"):
            if not self.openapi_spec_url:
                raise ValueError(
                    f"openapi_spec_url must be set in {self.environment} environment"
                )
        else:
            if not self.openapi_spec_url:
                warnings.warn(
                    "openapi_spec_url is empty; the application will refuse "
                    "to start until it is set.",
                    UserWarning,
                    stacklevel=2,
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused,
    avoiding repeated environment variable parsing.
    """
    return Settings()
