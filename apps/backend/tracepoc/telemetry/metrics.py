from __future__ import annotations

from prometheus_client import Counter, Histogram

requests_total = Counter(
    "tracepoc_requests_total",
    "Total requests handled",
    ["route", "status"],
)

request_latency_ms = Histogram(
    "tracepoc_request_latency_ms",
    "Request latency in milliseconds",
    ["route"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2000),
)
