"""
Task Manager OpenTelemetry Setup

Traces for service operations (one span per task operation). The endpoint comes from
Settings.otel_endpoint; without one spans are recorded by the SDK but not exported.
"""
from __future__ import annotations
from typing import Optional
import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)


def setup_otel(
    service_name: str = "task-manager",
    endpoint: Optional[str] = None,
) -> trace.Tracer:
    """Initialize OpenTelemetry, exporting over OTLP when an endpoint is set."""
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if endpoint:
        # Optional extra: opentelemetry-exporter-otlp-proto-grpc
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        exporter = OTLPSpanExporter(endpoint=endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("Exporting traces to %s", endpoint)

    trace.set_tracer_provider(provider)
    return trace.get_tracer(service_name)
