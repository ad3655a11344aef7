from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from tracepoc.core.config import Settings
from tracepoc.core.logging import get_logger


def _build_exporter(settings: Settings) -> SpanExporter:
    if settings.otel_exporter == "console":
        return ConsoleSpanExporter()
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    return OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint, insecure=True)


def configure_telemetry(settings: Settings) -> TracerProvider | None:
    logger = get_logger(__name__)
    if not settings.tracing_active:
        logger.info("telemetry.disabled", extra={"event": "telemetry_disabled"})
        return None

    try:
        provider = TracerProvider(resource=Resource.create({"service.name": settings.otel_service_name}))
        provider.add_span_processor(BatchSpanProcessor(_build_exporter(settings)))
        trace.set_tracer_provider(provider)
        logger.info("telemetry.enabled", extra={"event": "telemetry_enabled"})
        return provider
    except Exception as exc:  # noqa: BLE001
        logger.warning("telemetry.init_failed", extra={"event": "telemetry_init_failed"}, exc_info=exc)
        return None


def shutdown_telemetry(provider: TracerProvider | None) -> None:
    if provider is not None:
        provider.shutdown()
