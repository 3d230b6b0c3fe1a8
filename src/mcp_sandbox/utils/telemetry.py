"""OpenTelemetry tracing helpers.

Reflection and tool execution open spans through :func:`get_tracer`.  Until
:func:`configure_telemetry` installs an SDK provider those spans are the
API's no-ops, so instrumented code pays nothing when tracing is off.

The SDK and OTLP exporter are optional (``pip install mcp-sandbox[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

ATTR_MODULE_PATH = "mcp_sandbox.module.path"
ATTR_TOOL_COUNT = "mcp_sandbox.tool.count"
ATTR_TOOL_NAME = "mcp_sandbox.tool.name"
ATTR_TOOL_SUCCESS = "mcp_sandbox.tool.success"
ATTR_TOOL_TIMED_OUT = "mcp_sandbox.tool.timed_out"
ATTR_EXECUTION_TIME_MS = "mcp_sandbox.tool.execution_time_ms"
ATTR_RPC_METHOD = "mcp_sandbox.rpc.method"

_INSTRUMENTATION_NAME = "mcp_sandbox"
_INSTALL_HINT = "Install it with: pip install mcp-sandbox[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name* (no-op until telemetry is configured)."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "mcp-sandbox",
    export_to_console: bool = False,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider.

    Spans go to stdout when *export_to_console* is set and to an OTLP/gRPC
    collector when *otlp_endpoint* is given.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP, the exporter)
            is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for configure_telemetry(). {_INSTALL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    for processor in _span_processors(export_to_console, otlp_endpoint):
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)


def _span_processors(export_to_console: bool, otlp_endpoint: str | None) -> list[Any]:
    from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    processors: list[Any] = []
    if export_to_console:
        processors.append(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
                OTLPSpanExporter,
            )
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_INSTALL_HINT}"
            raise ImportError(msg) from exc
        processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    return processors
