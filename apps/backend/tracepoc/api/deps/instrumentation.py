from __future__ import annotations

from fastapi import Request

from tracepoc.telemetry.helpers import Instrumentation, default_instrumentation


def get_instrumentation(request: Request) -> Instrumentation:
    return getattr(request.app.state, "instrumentation", default_instrumentation)
