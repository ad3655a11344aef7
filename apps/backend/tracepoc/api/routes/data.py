from __future__ import annotations

from fastapi import APIRouter, Depends

from tracepoc.api.deps.instrumentation import get_instrumentation
from tracepoc.schemas.data import ProcessedDataResponse
from tracepoc.services.data_service import DataService
from tracepoc.telemetry.helpers import Instrumentation

router = APIRouter()


@router.get("/data", response_model=ProcessedDataResponse)
async def get_data(instrumentation: Instrumentation = Depends(get_instrumentation)) -> ProcessedDataResponse:
    payload = await instrumentation.with_span_async(
        "api.data.handler",
        DataService(instrumentation).load_processed_data,
    )
    return ProcessedDataResponse.model_validate(payload)
