from __future__ import annotations

import time
from typing import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    labelnames=("endpoint", "method", "status"),
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("endpoint", "method"),
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0),
)
pipeline_tasks_total = Counter(
    "pipeline_tasks_total",
    "Pipeline tasks executed",
    labelnames=("task_type", "status"),
)
pipeline_task_duration_seconds = Histogram(
    "pipeline_task_duration_seconds",
    "Pipeline task duration in seconds",
    labelnames=("task_type",),
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
)
pipeline_batch_duration_seconds = Histogram(
    "pipeline_batch_duration_seconds",
    "End-to-end batch duration in seconds",
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 60.0, 120.0),
)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _observe(request, "500", start)
            raise
        _observe(request, str(getattr(response, "status_code", 200)), start)
        return response


def _observe(request: Request, status: str, start: float) -> None:
    endpoint = _endpoint_label(request)
    method = request.method
    http_requests_total.labels(endpoint=endpoint, method=method, status=status).inc()
    http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(time.perf_counter() - start)


def _endpoint_label(request: Request) -> str:
    # Route templates only; requests that match no route share one label.
    route = request.scope.get("route")
    path = getattr(route, "path", None) or getattr(route, "path_format", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


def record_task(task_type: str, success: bool, seconds: float) -> None:
    pipeline_tasks_total.labels(task_type=task_type, status="success" if success else "failure").inc()
    pipeline_task_duration_seconds.labels(task_type=task_type).observe(seconds)


def record_batch_duration(seconds: float) -> None:
    pipeline_batch_duration_seconds.observe(seconds)


# Router to expose /metrics
router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
