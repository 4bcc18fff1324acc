from __future__ import annotations

import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from formintake.api.router import api_router
from formintake.core.config import Settings, settings
from formintake.core.errors import register_exception_handlers
from formintake.db.session import create_tables
from formintake.middleware.logging import RequestLoggingMiddleware
from formintake.middleware.rate_limit import MinuteBucketRateLimiter, RateLimitMiddleware
from formintake.middleware.request_context import RequestContextMiddleware
from formintake.schemas.submission import HealthOut

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger("formintake")


def create_app(
    app_settings: Settings | None = None,
    *,
    rate_limiter: MinuteBucketRateLimiter | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title=app_settings.app_name, version="0.1.0")

    limiter = rate_limiter or MinuteBucketRateLimiter(
        limit=app_settings.rate_limit_per_minute,
        max_keys=app_settings.rate_limit_max_keys,
    )
    app.state.rate_limiter = limiter

    origins = app_settings.cors_origin_list
    # Starlette applies the last added middleware first: request id, then logging, then throttling.
    app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    @app.get("/health", response_model=HealthOut)
    @app.get("/api/health", response_model=HealthOut)
    async def health_check():
        return HealthOut()

    app.include_router(api_router)

    if app_settings.auto_create_tables:

        @app.on_event("startup")
        async def _create_tables() -> None:
            await create_tables()
            logger.info("tables_ready")

    return app


app = create_app()
