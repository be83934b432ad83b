"""
ShiftMaster Backend — Access Log Middleware
=============================================

What:  One access-log line per HTTP request, keyed by the matched route
       template rather than the raw path.
How:   Times the downstream call and reads `scope["route"]`, which FastAPI
       fills in while routing. Unrouted paths (the /api/* 404s) log as
       "<unmatched>" so probes for random URLs collapse into one bucket.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Levels:
    5xx or an exception escaping the app   → ERROR
    4xx, or a 2xx/3xx slower than SLOW_MS  → WARNING
    everything else                        → INFO

A dashboard request fans out five count queries; one that succeeds but
crosses SLOW_MS points at a saturated connection pool.

Not logged: request bodies, query strings, Authorization headers.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from shiftmaster.middleware.request_id import request_id_var

logger = logging.getLogger("shiftmaster.access")

# Probed every few seconds by orchestrators
QUIET_PATHS = frozenset({"/health"})

SLOW_MS = 1000.0

UNMATCHED_ROUTE = "<unmatched>"


def level_for_status(status: int, elapsed_ms: float = 0.0) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or elapsed_ms >= SLOW_MS:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status: Optional[int] = None
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._emit(request, status, (time.perf_counter() - started) * 1000)

    @staticmethod
    def _emit(request: Request, status: Optional[int], elapsed_ms: float) -> None:
        # status is None when the app raised; the catch-all handler answers 500
        effective = status if status is not None else 500
        route = route_template(request)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(effective, elapsed_ms),
            "%s %s -> %d in %.1fms route=%s rid=%s%s",
            request.method,
            request.url.path,
            effective,
            elapsed_ms,
            route,
            rid,
            "" if status is not None else " (unhandled exception)",
            extra={
                "request_id": rid,
                "http_method": request.method,
                "route": route,
                "status_code": effective,
                "elapsed_ms": round(elapsed_ms, 2),
                "unhandled": status is None,
            },
        )
