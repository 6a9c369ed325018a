"""Logfire settings, read from logfire's own ``LOGFIRE_*`` environment variables."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

# Per-environment defaults; explicit settings still win
_ENVIRONMENT_DEFAULTS: dict[str, dict[str, bool]] = {
    "production": {"console": False, "send_to_logfire": True},
    "development": {"console": True, "send_to_logfire": False},
}


class ObservabilityConfig(BaseSettings):
    """
    Logfire settings for the catalog.

    Nothing leaves the process unless ``send_to_logfire`` is set, so a missing
    token is never an error.
    """

    model_config = SettingsConfigDict(env_prefix="LOGFIRE_", extra="ignore")

    token: str = ""
    service_name: str = "local-library"
    environment: str = "development"

    enabled: bool = True
    console: bool = False
    send_to_logfire: bool = False


def get_environment_config(environment: str | None = None) -> ObservabilityConfig:
    """Settings for ``environment`` (default: ``LOGFIRE_ENVIRONMENT``) with its defaults applied."""
    environment = environment or os.getenv("LOGFIRE_ENVIRONMENT", "development")
    defaults = _ENVIRONMENT_DEFAULTS.get(environment, {})
    config = ObservabilityConfig(environment=environment)
    # Environment variables the user set take precedence over the profile
    overrides = {
        field: value
        for field, value in defaults.items()
        if f"LOGFIRE_{field.upper()}" not in os.environ
    }
    return config.model_copy(update=overrides)
