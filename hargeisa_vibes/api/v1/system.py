"""Health and diagnostics endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_db, require_admin_read
from hargeisa_vibes.config import settings
from hargeisa_vibes.services.email_service import email_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def health_payload(db: AsyncSession) -> dict:
    """Service status with a database round trip."""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "disconnected"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "database": database,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health")
async def health_check(db: Annotated[AsyncSession, Depends(get_db)]) -> dict:
    return await health_payload(db)


@router.get("/test-email", dependencies=[Depends(require_admin_read)])
async def test_email() -> dict:
    """Check that the configured mail transport accepts our credentials."""
    ok, message = await email_service.verify_connection()
    return {"success": ok, "message": message}
