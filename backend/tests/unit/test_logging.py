"""Unit tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from cx_traceability.core.config import Settings, get_settings
from cx_traceability.core.logging import (
    QUIET_LOGGERS,
    build_processors,
    configure_logging,
    get_logger,
)


def _settings(**overrides: str) -> Settings:
    return Settings(openapi_spec_url="https://schemas.example/quality.yaml", **overrides)


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    saved_root = root.level
    yield
    root.setLevel(saved_root)
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
    configure_logging(get_settings())


class TestBuildProcessors:
    def test_development_renders_to_console(self) -> None:
        processors = build_processors(_settings(environment="development"))

        assert processors[0] is structlog.stdlib.filter_by_level
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_production_renders_json(self) -> None:
        processors = build_processors(_settings(environment="production"))

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert structlog.processors.dict_tracebacks in processors

    def test_service_context_does_not_override_event_fields(self) -> None:
        settings = _settings(environment="staging", version="9.9.9")
        add_context = build_processors(settings)[4]

        event = add_context(None, "info", {"event": "x", "version": "from-event"})

        assert event["service"] == settings.project_name
        assert event["environment"] == "staging"
        assert event["version"] == "from-event"


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    def test_levels_follow_settings(self) -> None:
        configure_logging(_settings(environment="production", log_level="ERROR"))

        assert logging.getLogger().level == logging.ERROR
        assert all(logging.getLogger(name).level == logging.ERROR for name in QUIET_LOGGERS)

    def test_http_libraries_quieted_above_debug(self) -> None:
        configure_logging(_settings(environment="production", log_level="INFO"))

        assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)

    def test_http_libraries_verbose_in_debug(self) -> None:
        configure_logging(_settings(environment="production", log_level="DEBUG"))

        assert all(logging.getLogger(name).level == logging.DEBUG for name in QUIET_LOGGERS)

    def test_events_below_level_are_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        configure_logging(_settings(environment="production", log_level="WARNING"))
        logger = get_logger("cx_traceability.tests.level_filter")

        logger.info("edc_request_sent")
        logger.warning("edc_asset_response", status_code=409)

        assert len(caplog.records) == 1
        event = json.loads(caplog.records[0].getMessage())
        assert event["event"] == "edc_asset_response"
        assert event["level"] == "warning"
        assert event["service"] == "CX Traceability Notifications"
        assert event["environment"] == "production"

    def test_initial_values_are_bound(self, caplog: pytest.LogCaptureFixture) -> None:
        configure_logging(_settings(environment="production", log_level="INFO"))
        logger = get_logger("cx_traceability.tests.bound", component="edc")

        logger.info("edc_offer_setup_started")

        assert json.loads(caplog.records[-1].getMessage())["component"] == "edc"
