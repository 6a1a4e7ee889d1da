"""
Request logging and per-client rate limiting.
"""

import logging
import time

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from finance_dashboard.config import Settings

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One access log line per request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)
        client = request.client.host if request.client else "unknown"
        logger.info(
            f'{client} "{request.method} {request.url.path}" {response.status_code} '
            f'{duration_ms}ms "{request.headers.get("user-agent", "-")}"'
        )
        return response


def build_limiter(settings: Settings) -> Limiter:
    """A single budget per client address shared by every route."""
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
