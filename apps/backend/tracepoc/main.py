from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from tracepoc.api.errors.handlers import register_exception_handlers
from tracepoc.api.middleware.request_span import RequestSpanMiddleware
from tracepoc.api.routes import data, health, page, telemetry
from tracepoc.core.config import get_settings
from tracepoc.core.logging import configure_logging, get_logger
from tracepoc.core.telemetry import configure_telemetry, shutdown_telemetry
from tracepoc.telemetry.helpers import Instrumentation
from tracepoc.telemetry.spans import SpanRunner


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = get_settings()
    configure_logging(app_settings)
    provider = configure_telemetry(app_settings)
    logger = get_logger(__name__)
    logger.info("startup.begin", extra={"event": "startup"})
    yield
    shutdown_telemetry(provider)
    logger.info("shutdown.complete", extra={"event": "shutdown"})


def create_app(instrumentation: Instrumentation | None = None) -> FastAPI:
    app_settings = get_settings()
    app = FastAPI(
        title="Trace POC API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.instrumentation = instrumentation or Instrumentation(SpanRunner(tracer_name=app_settings.tracer_name))

    app.add_middleware(RequestSpanMiddleware)
    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(page.router)
    app.include_router(data.router, prefix="/api")
    app.include_router(telemetry.router, prefix="/api/telemetry")
    app.mount("/metrics", make_asgi_app())
    return app


app = create_app()
