"""Configuration for the paid-service orchestrator.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The routing fee ceiling for paywall payments is deliberately not a setting.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrchestratorSettings(BaseSettings):
    """Settings for the orchestrator CLI.

    Environment variables:
    - LND_MACAROON                  (hex-encoded macaroon; required)
    - LND_REST_URL                  (optional)
    - LND_CERT_PATH                 (optional)
    - PAID_SERVICES_CATALOG_URL     (optional)
    - PAID_SERVICES_NETWORK         (optional)
    - ORCHESTRATOR_MAX_CONCURRENCY  (optional)
    - LOG_LEVEL                     (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `OrchestratorSettings(_env_file=path_to_env)`.
    """

    lnd_macaroon: str = Field(
        default="",
        validation_alias="LND_MACAROON",
        description="Hex-encoded macaroon authorizing invoice decoding and payments",
    )
    lnd_rest_url: str = Field(
        default="https://localhost:8080",
        validation_alias="LND_REST_URL",
        description="Base URL of the LND REST API",
    )
    lnd_cert_path: Path | None = Field(
        default=None,
        validation_alias="LND_CERT_PATH",
        description="TLS certificate used to verify LND (system CA bundle when unset)",
    )

    catalog_base_url: str = Field(
        default="http://localhost:9735/paid-services",
        validation_alias="PAID_SERVICES_CATALOG_URL",
        description="Base URL of the paid-services directory",
    )
    network: str = Field(
        default="btc",
        validation_alias="PAID_SERVICES_NETWORK",
        description="Network name passed to the directory",
    )

    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        validation_alias="ORCHESTRATOR_MAX_CONCURRENCY",
        description="Maximum number of tasks running at once (unbounded when unset)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_lnd_auth(self) -> OrchestratorSettings:
        if not self.lnd_macaroon.strip():
            raise ValueError("LND_MACAROON is required")
        return self
