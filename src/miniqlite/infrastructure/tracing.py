"""OpenTelemetry tracing configuration.

Tracing is off unless the observability config names an OTLP endpoint or
asks for console export. Until then `trace_span` runs against the API's
no-op provider.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)

from miniqlite.infrastructure.config import ObservabilityConfig

TRACER_NAME = "miniqlite"

_tracer: trace.Tracer | None = None


def build_tracer_provider(config: ObservabilityConfig) -> TracerProvider:
    """Create a provider with one span processor per configured exporter."""
    from miniqlite import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": config.otel_service_name,
                "service.version": __version__,
            }
        )
    )
    if config.otel_endpoint:
        exporter = OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    if config.otel_console_export:
        # Synchronous, so spans print next to the command that made them
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    return provider


def setup_tracing(config: ObservabilityConfig) -> trace.Tracer | None:
    """Install a global tracer provider if any exporter is configured.

    Returns:
        The tracer now used by `trace_span`, or None when tracing stays off.
    """
    global _tracer

    if not (config.otel_endpoint or config.otel_console_export):
        return None

    provider = build_tracer_provider(config)
    trace.set_tracer_provider(provider)
    _tracer = provider.get_tracer(TRACER_NAME)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the block inside a span named `miniqlite.<name>`.

    Attribute values that are not strings, numbers or booleans are
    stringified. Exceptions are recorded on the span and re-raised.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(f"{TRACER_NAME}.{name}") as span:
        for key, value in (attributes or {}).items():
            if not isinstance(value, (str, int, float, bool)):
                value = str(value)
            span.set_attribute(key, value)
        yield span
