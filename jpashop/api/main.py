"""
jpashop API - FastAPI Application

Read API over orders that shows how the fetch strategy changes the number
of SQL statements and the response shape:
- /api/v1..v6/orders: orders with line items
- /api/v1..v4/simple-orders: orders with member and delivery only
- /api/osiv1, /api/osiv2: lazy loading after the unit of work closed
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
from sqlalchemy import func, select

from jpashop import __version__
from jpashop.api.middleware import (
    STATEMENT_COUNT_HEADER,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    StatementCountMiddleware,
    get_cors_origins,
)
from jpashop.api.routes import health, orders, simple_orders
from jpashop.config import get_settings
from jpashop.db.client import close_db, create_schema, get_db_session, init_db
from jpashop.db.models import Order
from jpashop.db.seed import seed_sample_orders
from jpashop.kernel.http.errors import register_exception_handlers
from jpashop.monitoring.metrics import get_metrics

# Map log level string to logging constant
_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def _get_log_level() -> int:
    """Get numeric log level from settings."""
    level_str = get_settings().log_level.lower()
    return _LOG_LEVEL_MAP.get(level_str, logging.INFO)


# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if get_settings().log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


async def _seed_if_empty() -> None:
    async with get_db_session() as session:
        existing = await session.scalar(select(func.count()).select_from(Order))
        if existing:
            logger.info("Sample data skipped, orders already present", orders=existing)
            return
        await seed_sample_orders(session)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()

    logger.info(
        "Starting jpashop API",
        version=__version__,
        environment=settings.environment,
        open_session_in_view=settings.open_session_in_view,
        batch_fetch_size=settings.default_batch_fetch_size,
    )

    await init_db()

    if settings.create_schema_on_startup:
        await create_schema()
    if settings.seed_sample_data:
        await _seed_if_empty()

    get_metrics().set_build_info(__version__)

    yield

    logger.info("Shutting down jpashop API")
    await close_db()


app = FastAPI(
    title="jpashop API",
    description="Order read API comparing lazy loading, fetch joins, batch fetching and DTO projection",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Middleware order matters - first added = innermost.
app.add_middleware(StatementCountMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", STATEMENT_COUNT_HEADER],
)

# Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(orders.router)
app.include_router(simple_orders.router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "jpashop API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics",
    }
