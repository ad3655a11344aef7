from __future__ import annotations

from pydantic import BaseModel


class TelemetryStatusResponse(BaseModel):
    otel_enabled: bool
    exporter: str
    collector_endpoint: str
    service_name: str
    tracer_name: str
