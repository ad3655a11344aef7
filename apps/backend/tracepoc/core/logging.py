from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

from tracepoc.core.config import Settings

# Record attributes copied into the JSON line when a caller passes them via ``extra``.
EXTRA_KEYS = ("event", "route", "record_count")


def current_trace_ids() -> tuple[str | None, str | None]:
    """Return hex (trace_id, span_id) of the active span, or (None, None)."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None, None
    return trace.format_trace_id(ctx.trace_id), trace.format_span_id(ctx.span_id)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        trace_id, span_id = current_trace_ids()
        payload_trace = getattr(record, "trace_id", None) or trace_id
        payload_span = getattr(record, "span_id", None) or span_id
        if payload_trace:
            payload["trace_id"] = payload_trace
        if payload_span:
            payload["span_id"] = payload_span

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class _JsonStreamHandler(logging.StreamHandler):
    pass


def configure_logging(settings: Settings) -> logging.Handler:
    """Install the JSON stdout handler on the root logger.

    Repeated calls replace the handler installed earlier and leave other
    handlers (pytest's capture, for instance) in place.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _JsonStreamHandler)]:
        root.removeHandler(existing)
    handler = _JsonStreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
