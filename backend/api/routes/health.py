"""Health check endpoints."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text

from api.dependencies import get_shell
from infrastructure.config import get_settings
from infrastructure.database import connection
from services.app_shell import AppShell

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.get("/health")
async def health_check(shell: Annotated[AppShell, Depends(get_shell)]):
    """Basic health check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "mode": shell.mode,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/db")
async def health_check_db():
    """Health check with database connectivity."""
    if connection.async_session_maker is None:
        return {
            "status": "healthy",
            "database": "not configured",
            "mode": "local",
            "timestamp": datetime.now(UTC).isoformat(),
        }

    try:
        async with connection.get_db_context() as db:
            result = await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=5.0)
            result.scalar()
        db_status = "connected"
    except TimeoutError:
        logger.error("Health check DB timeout")
        db_status = "error: database timeout"
    except Exception as e:
        logger.error("Health check DB error: %s", str(e))
        db_status = "error: database check failed"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "mode": "remote",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/redis")
async def health_redis():
    """Check the rate-limit storage."""
    if not settings.redis_url:
        return {"status": "healthy", "service": "redis", "detail": "not configured"}
    try:
        import redis.asyncio as aioredis

        r = aioredis.from_url(settings.redis_url)
        await asyncio.wait_for(r.ping(), timeout=3.0)
        await r.aclose()
        return {"status": "healthy", "service": "redis"}
    except TimeoutError:
        raise HTTPException(status_code=503, detail="Redis timeout")
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Redis unavailable: {str(e)}")
