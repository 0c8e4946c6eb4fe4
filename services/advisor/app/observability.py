from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy.ext.asyncio import AsyncEngine


REGISTRY = CollectorRegistry()
ProcessCollector(registry=REGISTRY)
PlatformCollector(registry=REGISTRY)
GCCollector(registry=REGISTRY)

_MS_BUCKETS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)

HTTP_REQUESTS_TOTAL = Counter(
    "advisor_http_requests_total",
    "HTTP requests by route template and status class",
    ["route", "method", "status"],
    registry=REGISTRY,
)
HTTP_LATENCY = Histogram(
    "advisor_http_latency_ms",
    "HTTP request latency in milliseconds",
    ["route", "method"],
    buckets=_MS_BUCKETS,
    registry=REGISTRY,
)

INTENT_TOTAL = Counter(
    "advisor_intent_total",
    "Classified advisor intents",
    ["intent", "tier"],
    registry=REGISTRY,
)
OUTCOME_TOTAL = Counter(
    "advisor_outcome_total",
    "Recommendation outcomes",
    ["outcome"],
    registry=REGISTRY,
)
LLM_LATENCY = Histogram(
    "advisor_llm_latency_ms",
    "Completion API latency in milliseconds",
    ["purpose"],
    buckets=_MS_BUCKETS,
    registry=REGISTRY,
)
LLM_ERROR_TOTAL = Counter("advisor_llm_error_total", "Completion API calls that raised", ["purpose"], registry=REGISTRY)


def setup_tracing(app: FastAPI, service_name: str, engine: AsyncEngine | None = None) -> None:
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)


@contextmanager
def timed_llm_call(purpose: str) -> Iterator[None]:
    """Times one completion API call; a raising call is counted and re-raised."""
    started = time.perf_counter()
    try:
        yield
    except Exception:
        LLM_ERROR_TOTAL.labels(purpose).inc()
        raise
    finally:
        LLM_LATENCY.labels(purpose).observe((time.perf_counter() - started) * 1000)


def _route_template(request: Request) -> str:
    # Label by template, not raw path, to keep cardinality bounded.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def add_metrics_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def _metrics(request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        resp = await call_next(request)
        route = _route_template(request)
        HTTP_LATENCY.labels(route, request.method).observe((time.perf_counter() - start) * 1000)
        HTTP_REQUESTS_TOTAL.labels(route, request.method, f"{resp.status_code // 100}xx").inc()
        return resp

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
