"""Request tracing and latency middleware"""

import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from fintrack_core.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    # Paths no route matched share one label
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, reusing the caller's when present"""

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Observe request latency per method, route template and status"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        request_duration_histogram.labels(
            method=request.method,
            endpoint=_route_template(request),
            status=response.status_code,
        ).observe(time.perf_counter() - started)
        return response
