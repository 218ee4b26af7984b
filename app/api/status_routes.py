"""
Status API routes - Health check for the API and its database.

Public endpoint (no auth) for load balancers and uptime checks.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from structlog import get_logger

from app.config import settings
from app.db.migration_runner import check_migrations_status
from app.db.session import get_db
from app.models.api import HealthResponse

logger = get_logger(__name__)
router = APIRouter(tags=["status"])


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """
    Report database connectivity and whether migrations are pending.

    Always 200; a failed check shows up as status "degraded".
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("health_check_database_failed", error=str(e))
        return HealthResponse(
            status="degraded", database="unavailable", version=settings.api_version
        )

    migration_status = await run_in_threadpool(check_migrations_status)
    pending = migration_status.get("pending")
    migrations_pending = pending if isinstance(pending, bool) else None
    if "error" in migration_status:
        logger.warning("health_check_migrations_failed", error=migration_status["error"])

    return HealthResponse(
        status="degraded" if migrations_pending else "healthy",
        database="connected",
        migrations_pending=migrations_pending,
        version=settings.api_version,
    )
