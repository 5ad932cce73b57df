"""Tests for tracing configuration (exporter choice, resource, untraced paths)."""

from unittest.mock import MagicMock

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from app.core.config import get_settings
from app.main import app
from app.shared.telemetry.telemetry import (
    UNTRACED_PATHS,
    TelemetryConfig,
    build_exporter,
)


class TestBuildExporter:
    def test_none_exports_nothing(self) -> None:
        assert build_exporter("none", "http://collector:4317") is None

    def test_otlp_with_endpoint(self) -> None:
        assert isinstance(build_exporter("otlp", "http://collector:4317"), OTLPSpanExporter)

    @pytest.mark.parametrize(
        ("exporter_type", "endpoint"),
        [("console", None), ("otlp", None), ("jaeger", "http://collector:4317")],
    )
    def test_falls_back_to_console(self, exporter_type, endpoint) -> None:
        assert isinstance(build_exporter(exporter_type, endpoint), ConsoleSpanExporter)


def test_resource_names_service_and_chat_platform() -> None:
    settings = get_settings()
    telemetry = TelemetryConfig.from_settings(settings)
    attributes = telemetry._resource().attributes
    assert attributes["service.name"] == settings.app_name
    assert attributes["chat.platform"] == "rocketchat"


def test_instrument_without_provider_is_noop() -> None:
    telemetry = TelemetryConfig("communications", "1.0.0")
    target = MagicMock()
    telemetry.instrument(target)
    assert target.mock_calls == []
    telemetry.shutdown()


def test_untraced_paths_are_routes() -> None:
    routes = {route.path for route in app.routes}
    assert set(UNTRACED_PATHS) <= routes
