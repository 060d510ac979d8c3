# backend/safeseat/main.py
"""
FastAPI application for the SafeSeat booking service.

Mounts the versioned API under /api/v1 plus the unversioned health and
Prometheus endpoints.
"""

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_VERSION
from .core.exceptions import DomainException
from .routes import health, prometheus
from .routes.v1 import bookings as bookings_v1, organizations as organizations_v1, pricing as pricing_v1

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.api_title,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Backstop for domain errors raised outside a route's own try/except."""
    http_exc = exc.to_http_exception()
    logger.info(f"{request.method} {request.url.path} -> {exc.code}")
    return JSONResponse(
        {"detail": http_exc.detail},
        status_code=http_exc.status_code,
        headers=http_exc.headers,
    )


# API v1 - all application routes
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(organizations_v1.router, prefix="/organizations")
api_v1.include_router(pricing_v1.router, prefix="/pricing")
app.include_router(api_v1)

# Infrastructure routes stay unversioned so external probes keep fixed paths
app.include_router(health.router)
app.include_router(prometheus.router)

logger.info(f"{settings.api_title} started in {settings.environment} mode")
