"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from subject_vault.shared.telemetry.logging import get_logger, setup_logging
from subject_vault.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from subject_vault.shared.telemetry.tracing import add_span_event, traced

__all__ = [
    "TelemetryConfig",
    "add_span_event",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
