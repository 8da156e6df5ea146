"""Middleware registration."""

from fastapi import FastAPI

from rmce.config import Settings
from rmce.middleware.access_log import AccessLogMiddleware
from rmce.middleware.cors import setup_cors
from rmce.middleware.error_handler import setup_error_handlers
from rmce.middleware.logging import setup_logging
from rmce.middleware.rate_limit import RateLimitMiddleware
from rmce.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Starlette runs middleware in reverse-add order (last added = outermost).
    CORS is outermost so it also wraps 429 responses; the request id is bound
    before the access log and rate limiter run.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
