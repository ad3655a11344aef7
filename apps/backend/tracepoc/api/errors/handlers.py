from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from tracepoc.core.logging import current_trace_ids
from tracepoc.schemas.common import ErrorResponse


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
    trace_id: str | None = None,
) -> JSONResponse:
    if trace_id is None:
        trace_id, _ = current_trace_ids()
    envelope = ErrorResponse(code=code, message=message, details=details, trace_id=trace_id)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


def internal_error_response(exc: Exception, trace_id: str | None = None) -> JSONResponse:
    return error_response(500, "internal_error", "Internal server error", {"error": str(exc)}, trace_id)


def register_exception_handlers(app: FastAPI) -> None:
    # Unhandled exceptions are answered by RequestSpanMiddleware.
    @app.exception_handler(HTTPException)
    async def on_http_error(_: Request, exc: HTTPException) -> JSONResponse:
        return error_response(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(ValidationError)
    async def on_model_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return error_response(422, "validation_error", "Validation failed", exc.errors())

    @app.exception_handler(RequestValidationError)
    async def on_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(422, "request_validation_error", "Request validation failed", exc.errors())
