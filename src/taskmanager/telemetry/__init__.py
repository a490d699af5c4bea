"""Telemetry and observability."""
from taskmanager.telemetry.instrumentation import TelemetryManager, set_span_attributes

__all__ = ["TelemetryManager", "set_span_attributes"]
