from fastapi.testclient import TestClient
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY

from tracepoc.main import create_app


def _client(tracing, **kwargs):
    return TestClient(create_app(tracing.instrumentation), **kwargs)


def test_data_route_traces_each_step(tracing):
    response = _client(tracing).get("/api/data")

    assert response.status_code == 200
    body = response.json()
    assert [u["name"] for u in body["users"]] == ["Alice", "Bob", "Charlie"]
    assert body["metadata"]["status"] == "success"
    assert "processedAt" in body

    (handler,) = tracing.finished("api.data.handler")
    assert handler.status.status_code is StatusCode.OK
    (query,) = tracing.finished("db.query")
    assert query.attributes["db.statement"] == "SELECT * FROM users"
    (call,) = tracing.finished("external.api.call")
    assert call.attributes["net.peer.name"] == "api.example.com"
    (processing,) = tracing.finished("data.processing")
    assert dict(processing.attributes) == {"processing.type": "transform", "processing.record_count": 3}
    for child in (query, call, processing):
        assert child.parent.span_id == handler.context.span_id


def test_page_route_uses_session_cookie(tracing):
    response = _client(tracing, cookies={"session": "sess-42"}).get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["dynamicSection"]["userData"]["sessionId"] == "sess-42"
    assert body["staticSection"]["config"]["version"] == "1.0.0"
    assert body["apiData"]["metadata"]["status"] == "success"

    (user_load,) = tracing.finished("dynamic.user.data.load")
    assert user_load.attributes["user.session_id"] == "sess-42"
    (request,) = tracing.finished("page.http.request")
    (page_fetch,) = tracing.finished("page.fetch.api")
    assert request.parent.span_id == page_fetch.context.span_id
    assert request.attributes["http.target"] == "/api/data"
    (static_fetch,) = tracing.finished("static.component.fetch")
    (merge,) = tracing.finished("data.processing")
    assert merge.parent.span_id == static_fetch.context.span_id
    assert merge.attributes["processing.record_count"] == 2


def test_page_route_defaults_to_anonymous_session(tracing):
    body = _client(tracing).get("/").json()

    assert body["dynamicSection"]["userData"]["sessionId"] == "anonymous"
    greeting = body["dynamicSection"]["personalizedContent"]["greeting"]
    assert greeting == f"Hello, User {body['dynamicSection']['userData']['userId']}!"


def test_health_and_telemetry_status(tracing):
    client = _client(tracing)

    assert client.get("/health/live").json() == {"status": "ok"}
    status = client.get("/api/telemetry/status").json()
    assert status["service_name"] == "trace-poc"
    assert status["exporter"] in {"otlp", "console", "none"}


def test_unhandled_errors_use_error_envelope(tracing, monkeypatch):
    from tracepoc.services import data_service

    def explode(self):
        raise RuntimeError("store offline")

    monkeypatch.setattr(data_service.DataService, "load_processed_data", explode)
    client = TestClient(create_app(tracing.instrumentation), raise_server_exceptions=False)

    response = client.get("/api/data")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "internal_error"
    assert body["details"] == {"error": "store offline"}
    (handler,) = tracing.finished("api.data.handler")
    assert handler.status.status_code is StatusCode.ERROR
    (request_span,) = tracing.finished("GET /api/data")
    assert request_span.status.status_code is StatusCode.ERROR
    assert body["trace_id"] == f"{request_span.context.trace_id:032x}"


def _single_trace(spans):
    roots = [s for s in spans if s.parent is None]
    assert len(roots) == 1
    assert {s.context.trace_id for s in spans} == {roots[0].context.trace_id}
    return roots[0]


def test_page_request_produces_a_single_trace(tracing):
    response = _client(tracing).get("/")

    assert response.status_code == 200
    root = _single_trace(tracing.finished())
    assert root.name == "GET /"
    assert root.attributes["http.status_code"] == 200
    for name in ("page.fetch.api", "static.component.fetch", "dynamic.component.fetch"):
        (section,) = tracing.finished(name)
        assert section.parent.span_id == root.context.span_id


def test_data_request_produces_a_single_trace(tracing):
    labels = {"route": "/api/data", "status": "200"}
    before = REGISTRY.get_sample_value("tracepoc_requests_total", labels) or 0.0

    _client(tracing).get("/api/data")

    assert REGISTRY.get_sample_value("tracepoc_requests_total", labels) == before + 1

    root = _single_trace(tracing.finished())
    assert root.name == "GET /api/data"
    (handler,) = tracing.finished("api.data.handler")
    assert handler.parent.span_id == root.context.span_id


def test_http_errors_carry_request_trace_id(tracing):
    response = _client(tracing).get("/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "http_error"
    (request_span,) = tracing.finished("GET /does-not-exist")
    assert body["trace_id"] == f"{request_span.context.trace_id:032x}"
    assert request_span.attributes["http.status_code"] == 404


def test_ready_reports_tracing_state(tracing):
    body = _client(tracing).get("/health/ready").json()

    assert body["status"] == "ok"
    assert body["tracing"] in {"enabled", "disabled"}
