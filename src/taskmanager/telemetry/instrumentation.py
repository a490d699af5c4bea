"""OpenTelemetry instrumentation setup."""

import json
import logging
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.semconv.resource import ResourceAttributes

from taskmanager.config import Settings

logger = logging.getLogger(__name__)

METRICS_EXPORT_INTERVAL_MS = 60000


def _signal_endpoint(base: str, signal: str) -> str:
    suffix = f"/v1/{signal}"
    return base if base.endswith(suffix) else f"{base.rstrip('/')}{suffix}"


class TelemetryManager:
    """Owns the tracer and meter providers for one application instance."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None
        self.meter_provider: MeterProvider | None = None

    def setup(self) -> None:
        """Initialize OpenTelemetry providers and exporters."""
        if not self.settings.otel_enabled:
            logger.info("OpenTelemetry is disabled")
            return

        logger.info("Initializing OpenTelemetry instrumentation")
        resource = self._create_resource()
        self._setup_tracing(resource)
        self._setup_metrics(resource)
        logger.info("OpenTelemetry instrumentation initialized successfully")

    def _create_resource(self) -> Resource:
        attributes = {
            ResourceAttributes.SERVICE_NAME: self.settings.otel_service_name,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: self.settings.environment,
        }
        attributes.update(self.settings.get_resource_attributes())
        return Resource.create(attributes)

    def _setup_tracing(self, resource: Resource) -> None:
        self.tracer_provider = TracerProvider(resource=resource)

        if self.settings.otel_traces_exporter == "otlp":
            endpoint = _signal_endpoint(self.settings.otel_exporter_otlp_endpoint, "traces")
            exporter = OTLPSpanExporter(endpoint=endpoint, headers=self.settings.get_otlp_headers())
            self.tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
            logger.info(f"OTLP trace exporter configured: {endpoint}")
        elif self.settings.otel_traces_exporter == "console":
            self.tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Console trace exporter configured")

        trace.set_tracer_provider(self.tracer_provider)

    def _setup_metrics(self, resource: Resource) -> None:
        if self.settings.otel_metrics_exporter == "otlp":
            endpoint = _signal_endpoint(self.settings.otel_exporter_otlp_endpoint, "metrics")
            exporter = OTLPMetricExporter(
                endpoint=endpoint, headers=self.settings.get_otlp_headers()
            )
            reader = PeriodicExportingMetricReader(
                exporter, export_interval_millis=METRICS_EXPORT_INTERVAL_MS
            )
            self.meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
            logger.info(f"OTLP metric exporter configured: {endpoint}")
        elif self.settings.otel_metrics_exporter == "console":
            reader = PeriodicExportingMetricReader(
                ConsoleMetricExporter(), export_interval_millis=METRICS_EXPORT_INTERVAL_MS
            )
            self.meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
            logger.info("Console metric exporter configured")
        else:
            self.meter_provider = MeterProvider(resource=resource)

        metrics.set_meter_provider(self.meter_provider)

    def shutdown(self) -> None:
        """Flush and shut down telemetry providers."""
        if self.tracer_provider:
            self.tracer_provider.shutdown()
        if self.meter_provider:
            self.meter_provider.shutdown()
        logger.info("OpenTelemetry shutdown complete")


def set_span_attributes(span: Any, **attributes: Any) -> None:
    """Set multiple attributes on a span, skipping None values."""
    for key, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            span.set_attribute(key, json.dumps(value))
        else:
            span.set_attribute(key, str(value))
