from __future__ import annotations

from types import SimpleNamespace

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from tracepoc.telemetry.helpers import Instrumentation
from tracepoc.telemetry.spans import SpanRunner


@pytest.fixture
def tracing():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    runner = SpanRunner(provider.get_tracer("tests"))

    def finished(name=None):
        spans = exporter.get_finished_spans()
        if name is None:
            return list(spans)
        return [s for s in spans if s.name == name]

    yield SimpleNamespace(
        runner=runner,
        instrumentation=Instrumentation(runner),
        exporter=exporter,
        finished=finished,
    )
    provider.shutdown()
