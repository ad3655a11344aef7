from __future__ import annotations

from fastapi import APIRouter

from tracepoc.core.config import get_settings
from tracepoc.schemas.telemetry import TelemetryStatusResponse

router = APIRouter()


@router.get("/status", response_model=TelemetryStatusResponse)
def telemetry_status() -> TelemetryStatusResponse:
    settings = get_settings()
    return TelemetryStatusResponse(
        otel_enabled=settings.tracing_active,
        exporter=settings.otel_exporter,
        collector_endpoint=settings.otel_exporter_otlp_endpoint,
        service_name=settings.otel_service_name,
        tracer_name=settings.tracer_name,
    )
