"""
Ordering Service — Health endpoint

Reports PostgreSQL and Redis reachability plus the daily reset marker, so
a stalled beat schedule shows up as last_reset lagging behind today.
"""
import asyncio
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text

from ordering.api.deps import get_daily_reset
from ordering.core.config import get_settings
from ordering.core.redis_client import get_redis
from ordering.db.database import engine

settings = get_settings()
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    deps: dict[str, str] = {}
    healthy = True

    try:
        async with engine.connect() as conn:
            await asyncio.wait_for(conn.execute(text("SELECT 1")), timeout=settings.HEALTH_CHECK_TIMEOUT)
        deps["database"] = "ok"
    except Exception as e:
        deps["database"] = f"error: {str(e)[:100]}"
        healthy = False

    try:
        redis = get_redis()
        await asyncio.wait_for(redis.ping(), timeout=settings.HEALTH_CHECK_TIMEOUT)
        deps["redis"] = "ok"
    except Exception as e:
        deps["redis"] = f"error: {str(e)[:100]}"
        healthy = False

    inventory_reset: dict = {}
    if deps["redis"] == "ok":
        try:
            outcome = await get_daily_reset().status()
            inventory_reset = {
                "last_reset": outcome.last_reset,
                "today": outcome.today,
                "up_to_date": outcome.last_reset == outcome.today,
            }
        except (RedisError, OSError) as e:
            inventory_reset = {"error": str(e)[:100]}

    return JSONResponse(
        content={
            "status": "healthy" if healthy else "degraded",
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "dependencies": deps,
            "inventory_reset": inventory_reset,
        },
        status_code=200 if healthy else 503,
    )
