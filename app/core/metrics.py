"""
Prometheus 메트릭 (/actuator/prometheus)
"""
import time

from fastapi import Request
from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter(
    "http_server_requests_total",
    "Total HTTP requests",
    ["method", "uri", "status"],
)

http_request_duration_seconds = Histogram(
    "http_server_requests_seconds",
    "HTTP request duration in seconds",
    ["method", "uri"],
)

http_requests_in_progress = Gauge(
    "http_server_requests_active",
    "HTTP requests currently in progress",
    ["method"],
)

files_uploaded_total = Counter(
    "proximashare_files_uploaded_total",
    "Uploaded files",
    ["visibility"],
)

files_downloaded_total = Counter(
    "proximashare_files_downloaded_total",
    "Downloaded files",
    ["visibility"],
)

expired_files_deleted_total = Counter(
    "proximashare_expired_files_deleted_total",
    "Files removed by the cleanup scheduler",
)


def _route_template(request: Request) -> str:
    """uuid 등 경로 변수로 라벨이 폭증하지 않도록 라우트 템플릿 사용"""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "UNKNOWN"


class MetricsMiddleware(BaseHTTPMiddleware):
    """요청 수 / 처리 시간 수집"""

    async def dispatch(self, request: Request, call_next):
        method = request.method
        http_requests_in_progress.labels(method=method).inc()
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time
            uri = _route_template(request)
            http_requests_total.labels(method=method, uri=uri, status=str(status_code)).inc()
            http_request_duration_seconds.labels(method=method, uri=uri).observe(duration)
            http_requests_in_progress.labels(method=method).dec()
