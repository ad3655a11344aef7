"""Request-level span and metrics.

Every request runs inside one span from the app's :class:`Instrumentation`, so
the spans created by routes and services share a single trace. Unhandled
errors are turned into the error envelope here, while the request span is
still active, so the envelope carries the request's trace id.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tracepoc.api.deps.instrumentation import get_instrumentation
from tracepoc.api.errors.handlers import internal_error_response
from tracepoc.core.logging import current_trace_ids, get_logger
from tracepoc.telemetry.metrics import request_latency_ms, requests_total

logger = get_logger(__name__)


def _handler_label(request: Request) -> str:
    # Prefer the templated route; fall back to the raw path.
    route = request.scope.get("route")
    return getattr(route, "path_format", None) or getattr(route, "path", None) or request.url.path


class RequestSpanMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        instrumentation = get_instrumentation(request)
        started = time.perf_counter()
        status_code = 500
        trace_id: str | None = None
        try:
            with instrumentation.span(
                f"{request.method} {request.url.path}",
                **{"http.method": request.method, "http.target": request.url.path, "http.url": str(request.url)},
            ) as span:
                trace_id, _ = current_trace_ids()
                response = await call_next(request)
                status_code = response.status_code
                span.set_attribute("http.status_code", status_code)
            return response
        except Exception as exc:
            logger.error(
                "request.unhandled_error",
                extra={"event": "unhandled_error", "route": _handler_label(request)},
                exc_info=exc,
            )
            return internal_error_response(exc, trace_id)
        finally:
            route = _handler_label(request)
            requests_total.labels(route=route, status=str(status_code)).inc()
            request_latency_ms.labels(route=route).observe((time.perf_counter() - started) * 1000)
