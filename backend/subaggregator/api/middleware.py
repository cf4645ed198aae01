"""Request Logging Middleware — one structured log line per completed request.

Invariants:
    - Logs method, path, status, latency_ms and client ip for every request
    - Never changes the response; exceptions propagate to the error handlers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "completed request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": latency_ms,
                "client_ip": request.client.host if request.client else None,
            },
        )
        return response
