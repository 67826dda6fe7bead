"""Request logging middleware."""

import logging
from time import perf_counter
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from grue.common.headers import extract_forwarded_headers
from grue.common.logging_config import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and one per response with its duration."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("grue.web")

    async def dispatch(self, request: Request, call_next: Callable):
        started = perf_counter()
        client_ip = (
            extract_forwarded_headers(request.headers)["forwarded_for"]
            or (request.client.host if request.client else "unknown")
        )
        self.logger.info(f"{request.method} {request.url.path} from {client_ip}")

        response = await call_next(request)

        elapsed_ms = (perf_counter() - started) * 1000
        self.logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.2f}ms"
        )
        return response
