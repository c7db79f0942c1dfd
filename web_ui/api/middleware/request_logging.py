"""Request logging middleware - one line per /api request with status and latency"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from utils.logger import logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)

        path = request.url.path
        if path.startswith("/api"):
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.info(f"{request.method} {path} {response.status_code} in {duration_ms}ms")

        return response
