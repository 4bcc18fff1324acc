from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from formintake.request_context import client_ip

logger = logging.getLogger("formintake.ratelimit")

RATE_LIMITED_DETAIL = "Demasiadas solicitudes. Intenta en 1 minuto."


class MinuteBucketRateLimiter:
    """
    Fixed-window hit counter keyed by client address and wall-clock minute.

    Counters belonging to an earlier minute are dropped as soon as a new minute
    starts, and at most ``max_keys`` counters are held (oldest first out).
    Only ever mutated from the event loop thread.
    """

    def __init__(
        self,
        *,
        limit: int = 60,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self.max_keys = max_keys
        self._clock = clock
        self._bucket: int | None = None
        self._hits: OrderedDict[str, int] = OrderedDict()

    def _current_bucket(self) -> int:
        return int(self._clock() // 60)

    def _roll(self, bucket: int) -> None:
        if bucket != self._bucket:
            self._hits.clear()
            self._bucket = bucket

    @staticmethod
    def _key(address: str, bucket: int) -> str:
        # "<address>:<minute of hour>"
        return f"{address}:{bucket % 60}"

    def hit(self, address: str) -> bool:
        """Counts one request for ``address``; returns False once it is over the limit."""
        bucket = self._current_bucket()
        self._roll(bucket)
        key = self._key(address, bucket)
        count = self._hits.get(key, 0) + 1
        self._hits[key] = count
        self._hits.move_to_end(key)
        while len(self._hits) > self.max_keys:
            self._hits.popitem(last=False)
        return count <= self.limit

    def count(self, address: str) -> int:
        bucket = self._current_bucket()
        if bucket != self._bucket:
            return 0
        return self._hits.get(self._key(address, bucket), 0)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        limiter: MinuteBucketRateLimiter,
        path_prefixes: tuple[str, ...] = ("/",),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.path_prefixes = path_prefixes

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not path.startswith(self.path_prefixes):
            return await call_next(request)

        address = client_ip(request) or "unknown"
        allowed = self.limiter.hit(address)
        request.state.rate_limited = not allowed
        if not allowed:
            logger.warning("rate_limited", extra={"client_ip": address, "path": path})
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": "rate_limited", "detail": RATE_LIMITED_DETAIL},
            )
        return await call_next(request)
