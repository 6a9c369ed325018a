"""Logging and Logfire observability for the Local Library catalog."""

import logging
import sys

import logfire

from ..config import CatalogConfig, get_config
from .config import ObservabilityConfig, get_environment_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_config: ObservabilityConfig | None = None


def configure_logging(config: CatalogConfig | None = None) -> None:
    """Route catalog logs to stderr at the configured level."""
    config = config or get_config()
    level = logging.DEBUG if config.is_development else getattr(logging, config.log_level)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("local_library").setLevel(level)


def initialize_observability(config: ObservabilityConfig | None = None) -> None:
    """Configure Logfire; defaults to the settings for the current environment."""
    global _config  # noqa: PLW0603
    _config = config or get_environment_config()

    if not _config.enabled:
        logger.debug("Observability disabled via configuration")
        return

    logfire.configure(
        token=_config.token or None,
        service_name=_config.service_name,
        environment=_config.environment,
        send_to_logfire=_config.send_to_logfire,
        console=None if _config.console else False,
    )
    logger.debug("Logfire configured for %s (%s)", _config.service_name, _config.environment)


def get_observability_config() -> ObservabilityConfig:
    """Get current observability configuration."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = get_environment_config()
    return _config


__all__ = [
    "ObservabilityConfig",
    "configure_logging",
    "get_observability_config",
    "initialize_observability",
    "logfire",
]
