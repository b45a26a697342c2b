from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from instructormatch.api.deps import get_db_session
from instructormatch.core.config import get_settings
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_database(session: AsyncSession) -> dict:
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        return {"status": "error", "message": str(exc)[:100]}
    return {"status": "ok"}


@router.get("/health", summary="Service health probe")
async def health_check(session: AsyncSession = Depends(get_db_session)) -> dict:
    """Return service metadata and database reachability."""
    settings = get_settings()
    database_status = await check_database(session)

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": "ok" if database_status["status"] == "ok" else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {"postgres": database_status},
    }
    logger.info("health_probe", status=payload["status"], datastores=payload["datastores"])
    return payload
