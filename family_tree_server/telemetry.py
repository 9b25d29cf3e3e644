"""Telemetry setup for OpenTelemetry tracing.

Tool calls are wrapped in spans and exported over OTLP/HTTP when tracing is
enabled. Tracing is off by default and every helper here is a no-op then.

Environment Variables:
    TRACING_ENABLED: Set to 'true' to enable tracing (default: false)
    TRACING_ENDPOINT: OTLP collector base URL (default: http://localhost:6006)
    TRACING_SERVICE_NAME: service.name resource attribute (default: family-tree-server)
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from . import state

USER_ID_ATTRIBUTE = "family_tree.user_id"
TOOL_ATTRIBUTE = "family_tree.tool"


def is_tracing_enabled() -> bool:
    """Check if tracing is enabled via environment variable."""
    return os.getenv("TRACING_ENABLED", "false").lower() == "true"


def get_tracing_endpoint() -> str:
    """Get the OTLP collector endpoint."""
    return os.getenv("TRACING_ENDPOINT", "http://localhost:6006")


def get_service_name() -> str:
    """Get the service name reported with every span."""
    return os.getenv("TRACING_SERVICE_NAME", "family-tree-server")


class ActingUserProcessor(SpanProcessor):
    """Span processor that tags every span with the acting user id.

    Spans started while no user is configured are tagged 'anonymous'.
    """

    def on_start(self, span: Any, parent_context: Any = None) -> None:
        """Called when a span starts. Sets the user id attribute."""
        if not hasattr(span, "set_attribute"):
            return
        span.set_attribute(USER_ID_ATTRIBUTE, state.ACTING_USER_ID or "anonymous")

    def on_end(self, span: ReadableSpan) -> None:
        """Called when a span ends. No-op for this processor."""
        pass

    def shutdown(self) -> None:
        """Shutdown the processor."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush any buffered spans."""
        return True


_tracer_provider: TracerProvider | None = None


def initialize_tracing() -> TracerProvider | None:
    """Initialize OpenTelemetry tracing.

    Returns:
        TracerProvider if tracing is enabled, None otherwise.
    """
    global _tracer_provider

    if not is_tracing_enabled():
        return None

    if _tracer_provider is not None:
        return _tracer_provider

    exporter = OTLPSpanExporter(endpoint=f"{get_tracing_endpoint()}/v1/traces")

    _tracer_provider = TracerProvider(resource=Resource.create({SERVICE_NAME: get_service_name()}))
    _tracer_provider.add_span_processor(ActingUserProcessor())
    _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(_tracer_provider)
    return _tracer_provider


def get_tracer(name: str = "family-tree-server") -> trace.Tracer:
    """Get a tracer instance (no-op if tracing disabled)."""
    return trace.get_tracer(name)


@contextmanager
def tool_span(tool_name: str) -> Iterator[trace.Span]:
    """Run the enclosed block inside a span named after the tool.

    Exceptions are recorded on the span and re-raised.
    """
    with get_tracer().start_as_current_span(f"tool.{tool_name}") as span:
        span.set_attribute(TOOL_ATTRIBUTE, tool_name)
        yield span
