"""
Operational endpoints.

- /health: process is up, with the fetch settings the order routes run with
- /ready: the database answers and the shop schema is in place
- /live: liveness probe, no IO
"""

from datetime import datetime

import structlog
from fastapi import APIRouter, Response
from sqlalchemy import func, select

from jpashop import __version__
from jpashop.config import get_settings
from jpashop.db.client import get_db_session
from jpashop.db.models import Order

router = APIRouter()
logger = structlog.get_logger()

_started_at = datetime.utcnow()


@router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "jpashop-api",
        "version": __version__,
        "environment": settings.environment,
        "fetch": {
            "batch_fetch_size": settings.default_batch_fetch_size,
            "open_session_in_view": settings.open_session_in_view,
        },
        "uptime_seconds": (datetime.utcnow() - _started_at).total_seconds(),
    }


@router.get("/ready")
async def readiness_check(response: Response):
    """
    Ready once the orders table can be queried.

    Answers 503 with `status: degraded` while the engine is not initialized
    or the schema is missing.
    """
    checks = {"database": False}
    orders: int | None = None

    try:
        async with get_db_session() as session:
            orders = await session.scalar(select(func.count()).select_from(Order))
        checks["database"] = True
    except Exception as exc:
        logger.warning("Readiness check failed", error_type=type(exc).__name__, error=str(exc))

    ready = all(checks.values())
    if not ready:
        response.status_code = 503

    return {
        "status": "ready" if ready else "degraded",
        "checks": checks,
        "orders": orders,
    }


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
