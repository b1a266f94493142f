"""
Prometheus Metrics Middleware

Exposes:
  - http_requests_total                 (counter)
  - http_request_duration_seconds       (histogram)
  - http_requests_in_progress           (gauge)
  - workspace_resolutions_total         (counter, by outcome)
  - landing_page_generations_total      (counter, by source)
  - provisioning_failures_total         (counter, by step)
  - app_info                            (info)
"""

import re
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# ── HTTP metrics ──
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of in-progress requests",
    ["method"],
)
APP_INFO = Info("app", "Application metadata")

# ── Domain metrics ──
WORKSPACE_RESOLUTIONS = Counter(
    "workspace_resolutions_total",
    "Hostname to workspace resolutions",
    ["outcome"],   # custom_domain, subdomain, miss, error
)
LANDING_PAGE_GENERATIONS = Counter(
    "landing_page_generations_total",
    "Landing page configurations generated",
    ["source"],    # openai, fallback
)
PROVISIONING_FAILURES = Counter(
    "provisioning_failures_total",
    "Signup / recovery provisioning failures",
    ["step"],
)

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")


def _normalize_path(path: str) -> str:
    """Collapse UUID / numeric path segments to prevent cardinality explosion."""
    path = _UUID_RE.sub("{id}", path)
    path = re.sub(r"/\d+", "/{id}", path)
    return path


def record_resolution(outcome: str) -> None:
    WORKSPACE_RESOLUTIONS.labels(outcome=outcome).inc()


def record_generation(source: str) -> None:
    LANDING_PAGE_GENERATIONS.labels(source=source).inc()


def record_provisioning_failure(step: str) -> None:
    PROVISIONING_FAILURES.labels(step=step).inc()


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = _normalize_path(request.url.path)

        # Skip metrics endpoint itself
        if path == "/metrics":
            return await call_next(request)

        REQUESTS_IN_PROGRESS.labels(method=method).inc()
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            REQUEST_COUNT.labels(method=method, endpoint=path, status="500").inc()
            REQUEST_DURATION.labels(method=method, endpoint=path).observe(
                time.perf_counter() - start
            )
            REQUESTS_IN_PROGRESS.labels(method=method).dec()
            raise

        elapsed = time.perf_counter() - start
        REQUEST_COUNT.labels(method=method, endpoint=path, status=str(response.status_code)).inc()
        REQUEST_DURATION.labels(method=method, endpoint=path).observe(elapsed)
        REQUESTS_IN_PROGRESS.labels(method=method).dec()

        return response


def metrics_endpoint(request: Request) -> Response:
    """Expose /metrics for Prometheus scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def set_app_info(version: str = "1.0.0", env: str = "development") -> None:
    APP_INFO.info({"version": version, "environment": env})
