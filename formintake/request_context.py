from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from formintake.schemas.submission import RequestOrigin


def client_ip(request: Request) -> str | None:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        # Left-most entry is the client.
        return xff.split(",")[0].strip() or None
    xrip = request.headers.get("x-real-ip")
    if xrip:
        return xrip.strip() or None
    return request.client.host if request.client else None


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    ip: str | None = None
    user_agent: str | None = None

    def origin(self) -> RequestOrigin:
        return RequestOrigin(ip=self.ip, user_agent=self.user_agent)


def get_request_context(request: Request) -> RequestContext:
    request_id = getattr(request.state, "request_id", None) or "unknown"
    return RequestContext(
        request_id=request_id,
        ip=client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )
