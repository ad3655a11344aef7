from __future__ import annotations

from fastapi import APIRouter, Cookie, Depends

from tracepoc.api.deps.instrumentation import get_instrumentation
from tracepoc.core.config import get_settings
from tracepoc.schemas.page import PageResponse
from tracepoc.services.page_service import PageService
from tracepoc.telemetry.helpers import Instrumentation

router = APIRouter()


@router.get("/", response_model=PageResponse)
async def home(
    session: str | None = Cookie(default=None),
    instrumentation: Instrumentation = Depends(get_instrumentation),
) -> PageResponse:
    payload = await PageService(instrumentation, get_settings()).render(session)
    return PageResponse.model_validate(payload)
