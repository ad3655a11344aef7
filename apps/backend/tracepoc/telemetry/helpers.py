"""Naming and attribute helpers layered on :class:`SpanRunner`.

Every helper merges its fixed attributes first and the caller's ``attributes``
last, so a caller-supplied key always overrides a helper default.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import httpx
from opentelemetry.trace import Span

from tracepoc.telemetry.spans import AttributeValue, Attributes, SpanRunner, default_runner

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

ANONYMOUS = "anonymous"

DB_QUERY_SPAN = "db.query"
API_CALL_SPAN = "external.api.call"
PROCESSING_SPAN = "data.processing"


def merge_attributes(defaults: Attributes, overrides: Attributes | None = None) -> dict[str, AttributeValue]:
    return {**defaults, **(overrides or {})}


def span_name_for(fn: Callable[..., Any], prefix: str | None = None) -> str:
    identifier = getattr(fn, "__name__", "") or ""
    if not identifier or identifier == "<lambda>":
        identifier = ANONYMOUS
    return f"{prefix}.{identifier}" if prefix else identifier


def peer_host(url: str) -> str:
    """Return the host of an absolute URL, raising ``ValueError`` if there is none."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(f"cannot derive peer host from malformed URL {url!r}: {exc}") from exc
    if not parsed.scheme or not parsed.host:
        raise ValueError(f"cannot derive peer host from URL {url!r}: scheme and host are required")
    return parsed.host


class DbSpans:
    def __init__(self, runner: SpanRunner, system: str = "postgresql") -> None:
        self._runner = runner
        self.system = system

    def query(
        self,
        operation: Callable[[], T | Awaitable[T]],
        statement: str | None = None,
        *,
        system: str | None = None,
        attributes: Attributes | None = None,
    ) -> Any:
        defaults: dict[str, AttributeValue] = {"db.system": system or self.system}
        if statement:
            defaults["db.statement"] = statement
        return self._runner.with_span(DB_QUERY_SPAN, operation, merge_attributes(defaults, attributes))


class ApiSpans:
    def __init__(self, runner: SpanRunner) -> None:
        self._runner = runner

    def call(
        self,
        operation: Callable[[], T | Awaitable[T]],
        url: str,
        method: str = "GET",
        *,
        attributes: Attributes | None = None,
    ) -> Any:
        defaults = {
            "http.method": method,
            "http.url": url,
            "net.peer.name": peer_host(url),
        }
        return self._runner.with_span(API_CALL_SPAN, operation, merge_attributes(defaults, attributes))


class ComponentSpans:
    def __init__(self, runner: SpanRunner) -> None:
        self._runner = runner

    def load(self, name: str, operation: Callable[[], T | Awaitable[T]], attributes: Attributes | None = None) -> Any:
        return self._runner.with_span(f"{name}.load", operation, attributes)

    def fetch(self, name: str, operation: Callable[[], T | Awaitable[T]], attributes: Attributes | None = None) -> Any:
        return self._runner.with_span(f"{name}.fetch", operation, attributes)

    def process(
        self,
        operation: Callable[[], T | Awaitable[T]],
        type: str | None = None,  # noqa: A002
        record_count: int | None = None,
        *,
        attributes: Attributes | None = None,
    ) -> Any:
        defaults: dict[str, AttributeValue] = {}
        if type:
            defaults["processing.type"] = type
        if record_count is not None:
            defaults["processing.record_count"] = record_count
        return self._runner.with_span(PROCESSING_SPAN, operation, merge_attributes(defaults, attributes))


class Instrumentation:
    """Span runner plus the category helpers, all bound to one tracer."""

    def __init__(self, runner: SpanRunner | None = None) -> None:
        self.runner = runner or SpanRunner()
        self.db = DbSpans(self.runner)
        self.api = ApiSpans(self.runner)
        self.component = ComponentSpans(self.runner)

    def with_span(
        self,
        name: str,
        operation: Callable[[], T | Awaitable[T]],
        attributes: Attributes | None = None,
    ) -> Any:
        return self.runner.with_span(name, operation, attributes)

    async def with_span_async(
        self,
        name: str,
        operation: Callable[[], T | Awaitable[T]],
        attributes: Attributes | None = None,
    ) -> T:
        return await self.runner.with_span_async(name, operation, attributes)

    @contextmanager
    def span(self, name: str, **attrs: AttributeValue) -> Iterator[Span]:
        with self.runner.span(name, **attrs) as current:
            yield current

    def auto_trace(
        self,
        fn: F | None = None,
        *,
        prefix: str | None = None,
        name: str | None = None,
        attributes: Attributes | None = None,
    ) -> Any:
        """Wrap ``fn`` so each call runs in a span named after it.

        Works as ``auto_trace(fn, prefix=...)`` or as a decorator with or
        without arguments. ``name`` overrides the derived span name.
        """

        def decorate(target: F) -> F:
            span_name = name or span_name_for(target, prefix)

            if inspect.iscoroutinefunction(target):

                @functools.wraps(target)
                async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                    return await self.runner.with_span_async(span_name, lambda: target(*args, **kwargs), attributes)

                return async_wrapper  # type: ignore[return-value]

            @functools.wraps(target)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                return self.runner.with_span(span_name, lambda: target(*args, **kwargs), attributes)

            return wrapper  # type: ignore[return-value]

        if fn is None:
            return decorate
        return decorate(fn)


default_instrumentation = Instrumentation(default_runner)

db = default_instrumentation.db
api = default_instrumentation.api
component = default_instrumentation.component
auto_trace = default_instrumentation.auto_trace
