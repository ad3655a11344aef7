from __future__ import annotations

from fastapi import APIRouter

from tracepoc.core.config import get_settings

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.otel_service_name,
        "tracing": "enabled" if settings.tracing_active else "disabled",
    }
