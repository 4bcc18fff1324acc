from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from formintake.request_context import client_ip

logger = logging.getLogger("formintake.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emits one ``request_completed`` record per request with the submitter's
    address and whether the rate limiter turned the request away.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        rate_limited = bool(getattr(request.state, "rate_limited", False))
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "request_completed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "client_ip": client_ip(request),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": elapsed_ms,
                "rate_limited": rate_limited,
            },
        )
        return response
