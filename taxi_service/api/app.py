"""
FastAPI application factory.

* Registers routes for customers, drivers, ratings, notifications and admin.
* Maps every ``DomainError`` to ``{"detail", "code"}`` with its status code.
* Starts / stops the optional expiry sweeper via lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from taxi_service.api.dependencies import build_notification_sink
from taxi_service.api.middleware import limiter
from taxi_service.api.routes import admin, driver, notifications, orders, ratings
from taxi_service.config import settings
from taxi_service.domain.errors import DomainError
from taxi_service.workers import expiry as _expiry

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the expiry sweeper on startup if enabled; stop on shutdown."""
    if settings.expiry_sweep_enabled:
        await _expiry.start_expiry_loop(await build_notification_sink())
    yield
    if settings.expiry_sweep_enabled:
        await _expiry.stop_expiry_loop()


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s", exc.code, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    app = FastAPI(
        title="Taxi Service API",
        description=(
            "Intercity taxi and parcel delivery marketplace.  Customers post "
            "orders, drivers accept them against a prepaid balance, and every "
            "balance change is recorded in an append-only ledger."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(DomainError, domain_error_handler)

    # Routers
    for module in (orders, driver, ratings, notifications, admin):
        app.include_router(module.router, prefix=settings.api_prefix)

    return app
