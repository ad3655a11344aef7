from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode, Tracer

T = TypeVar("T")
AttributeValue = str | int | float | bool
Attributes = Mapping[str, AttributeValue]

DEFAULT_TRACER_NAME = "trace-poc"


def _mark_ok(span: Span) -> None:
    span.set_status(Status(StatusCode.OK))
    span.end()


def _mark_error(span: Span, exc: BaseException) -> None:
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    span.record_exception(exc)
    span.end()


class SpanRunner:
    """Runs a unit of work inside a span on an injected tracer.

    The span is active for the operation's whole execution, including the time
    spent awaiting it when the operation is asynchronous, and is ended exactly
    once with ``OK`` or ``ERROR`` status. Errors are recorded and re-raised
    unchanged.
    """

    def __init__(self, tracer: Tracer | None = None, tracer_name: str = DEFAULT_TRACER_NAME) -> None:
        self._tracer = tracer
        self._tracer_name = tracer_name

    @property
    def tracer(self) -> Tracer:
        # Resolved lazily so a provider installed at startup is picked up.
        if self._tracer is None:
            return trace.get_tracer(self._tracer_name)
        return self._tracer

    def _start(self, name: str, attributes: Attributes | None) -> Span:
        if not name:
            raise ValueError("span name must be a non-empty string")
        span = self.tracer.start_span(name)
        if attributes:
            span.set_attributes(dict(attributes))
        return span

    def with_span(
        self,
        name: str,
        operation: Callable[[], T | Awaitable[T]],
        attributes: Attributes | None = None,
    ) -> T | Awaitable[T]:
        """Run ``operation`` in a span named ``name``.

        A plain result is returned after the span is closed. An awaitable
        result is returned wrapped in a coroutine that keeps the span open and
        active until the awaitable settles.
        """
        span = self._start(name, attributes)
        try:
            with trace.use_span(span, record_exception=False, set_status_on_exception=False):
                result = operation()
        except BaseException as exc:
            _mark_error(span, exc)
            raise

        if inspect.isawaitable(result):
            return self._settle(span, result)
        _mark_ok(span)
        return result

    async def with_span_async(
        self,
        name: str,
        operation: Callable[[], T | Awaitable[T]],
        attributes: Attributes | None = None,
    ) -> T:
        span = self._start(name, attributes)
        try:
            with trace.use_span(span, record_exception=False, set_status_on_exception=False):
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
        except BaseException as exc:
            _mark_error(span, exc)
            raise
        _mark_ok(span)
        return result

    async def _settle(self, span: Span, pending: Awaitable[T]) -> T:
        try:
            with trace.use_span(span, record_exception=False, set_status_on_exception=False):
                value = await pending
        except BaseException as exc:
            _mark_error(span, exc)
            raise
        _mark_ok(span)
        return value

    @contextmanager
    def span(self, name: str, **attrs: AttributeValue) -> Iterator[Span]:
        span = self._start(name, attrs)
        try:
            with trace.use_span(span, record_exception=False, set_status_on_exception=False):
                yield span
        except BaseException as exc:
            _mark_error(span, exc)
            raise
        _mark_ok(span)


default_runner = SpanRunner()


def with_span(
    name: str,
    operation: Callable[[], T | Awaitable[T]],
    attributes: Attributes | None = None,
) -> Any:
    return default_runner.with_span(name, operation, attributes)


async def with_span_async(
    name: str,
    operation: Callable[[], T | Awaitable[T]],
    attributes: Attributes | None = None,
) -> T:
    return await default_runner.with_span_async(name, operation, attributes)


@contextmanager
def span(name: str, **attrs: AttributeValue) -> Iterator[Span]:
    with default_runner.span(name, **attrs) as current:
        yield current
