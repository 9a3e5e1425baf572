"""
Ordering Service — Celery tasks (daily inventory reset)

Celery tasks are not async-native: each run gets its own event loop, its
own engine and its own Redis connection, all closed before returning.
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ordering.core.redis_client import close_redis
from ordering.db.database import make_engine
from ordering.services.reset import DailyReset, RedisMarkerStore
from ordering.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _run_reset_check() -> dict:
    engine = make_engine()
    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    try:
        async with session_factory() as db:
            outcome = await DailyReset(RedisMarkerStore()).check(db)
    finally:
        await close_redis()
        await engine.dispose()
    return outcome.as_dict()


@celery_app.task(name="check_daily_reset", acks_late=True)
def check_daily_reset() -> dict:
    """Restore every item to its daily cap once per local calendar day."""
    outcome = asyncio.run(_run_reset_check())
    if outcome["reset_applied"]:
        logger.info("Daily stock reset for %s: %d items", outcome["today"], outcome["items_reset"])
    return outcome
