"""Tests for logging and Logfire setup."""

import logging
import os
from unittest.mock import patch

import pytest

from local_library.config import CatalogConfig
from local_library.errors import StoreError
from local_library.observability import (
    configure_logging,
    get_observability_config,
    initialize_observability,
)
from local_library.observability.config import ObservabilityConfig, get_environment_config
from local_library.observability.decorators import trace_controller
from local_library.observability.metrics import record_outcome
from local_library.outcomes import ErrorKind, ErrorResult


class TestObservabilityConfig:
    @pytest.fixture(autouse=True)
    def clean_logfire_env(self, monkeypatch):
        for key in list(os.environ):
            if key.startswith("LOGFIRE_"):
                monkeypatch.delenv(key)

    def test_defaults_stay_local(self):
        config = ObservabilityConfig()

        assert config.enabled is True
        assert config.send_to_logfire is False
        assert config.console is False
        assert config.service_name == "local-library"

    def test_reads_logfire_variables(self, monkeypatch):
        monkeypatch.setenv("LOGFIRE_TOKEN", "pylf_v1_token")
        monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "true")

        config = ObservabilityConfig()

        assert config.token == "pylf_v1_token"
        assert config.send_to_logfire is True

    def test_environment_defaults(self):
        production = get_environment_config("production")
        development = get_environment_config("development")

        assert (production.send_to_logfire, production.console) == (True, False)
        assert (development.send_to_logfire, development.console) == (False, True)
        assert get_environment_config("staging").send_to_logfire is False

    def test_explicit_variable_beats_environment_default(self, monkeypatch):
        monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

        assert get_environment_config("production").send_to_logfire is False


class TestInitializeObservability:
    def test_disabled_is_a_no_op(self):
        with patch("local_library.observability.logfire.configure") as configure:
            initialize_observability(ObservabilityConfig(enabled=False))

        configure.assert_not_called()
        assert get_observability_config().enabled is False

    def test_configures_logfire(self):
        config = ObservabilityConfig(
            token="",
            environment="test",
            enabled=True,
            send_to_logfire=False,
            console=False,
        )

        with patch("local_library.observability.logfire.configure") as configure:
            initialize_observability(config)

        configure.assert_called_once_with(
            token=None,
            service_name="local-library",
            environment="test",
            send_to_logfire=False,
            console=False,
        )


class TestLogging:
    def test_debug_overrides_level(self):
        configure_logging(CatalogConfig(debug=True, log_level="WARNING"))

        assert logging.getLogger("local_library").level == logging.DEBUG

    def test_configured_level(self):
        configure_logging(CatalogConfig(log_level="ERROR"))

        assert logging.getLogger("local_library").level == logging.ERROR


class TestInstrumentation:
    async def test_trace_controller_returns_result(self):
        @trace_controller("genre", "list")
        async def handler(value):
            return value * 2

        assert await handler(21) == 42
        assert handler.__name__ == "handler"

    async def test_trace_controller_describes_error_result(self):
        @trace_controller("genre", "detail")
        async def handler():
            return ErrorResult(kind=ErrorKind.NOT_FOUND, detail="Genre not found")

        with patch("local_library.observability.decorators.logfire.span") as span_factory:
            await handler()

        span = span_factory.return_value.__enter__.return_value
        span.set_attribute.assert_any_call("controller.success", True)
        span.set_attribute.assert_any_call("controller.error_kind", "NotFound")

    async def test_trace_controller_marks_failure(self):
        @trace_controller("genre", "list")
        async def handler():
            raise StoreError("disk full")

        with patch("local_library.observability.decorators.logfire.span") as span_factory:
            with pytest.raises(StoreError):
                await handler()

        span = span_factory.return_value.__enter__.return_value
        span.set_attribute.assert_any_call("controller.success", False)

    def test_record_outcome(self):
        with patch("local_library.observability.metrics.catalog_outcomes") as counter:
            record_outcome("genre", "redirect")

        counter.add.assert_called_once_with(1, {"entity": "genre", "outcome": "redirect"})
