"""Access logging for the shortkey web app."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


def level_for_status(status_code: int) -> int:
    """Log level for a response: WARNING for 4xx, ERROR for 5xx."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and latency."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortkey.web")

    async def dispatch(self, request: Request, call_next: Callable):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client = request.client.host if request.client else "-"
        self.logger.log(
            level_for_status(response.status_code),
            f"{client} {request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms",
        )
        return response
