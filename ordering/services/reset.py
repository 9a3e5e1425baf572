"""
Ordering Service — Daily inventory reset

A persisted marker holds the last local calendar day (DD/MM/YYYY) on which
stock was restored. check() compares it with today and, when they differ,
restores every item to its daily cap and then records today. Running it
again the same day performs no writes.

check() is driven by the Celery beat schedule and once at start-up.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Protocol

import redis.asyncio as aioredis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.clock import Clock
from ordering.core.config import get_settings
from ordering.core.errors import StoreError
from ordering.core.events import MENU_CHANNEL, publish_event
from ordering.core.redis_client import get_redis
from ordering.services import ledger

settings = get_settings()
logger = logging.getLogger(__name__)


class MarkerStore(Protocol):
    async def get(self) -> str | None: ...

    async def set(self, value: str) -> None: ...


class RedisMarkerStore:
    def __init__(self, redis: aioredis.Redis | None = None, key: str | None = None):
        self._redis = redis
        self.key = key or settings.RESET_MARKER_KEY

    @property
    def redis(self) -> aioredis.Redis:
        return self._redis or get_redis()

    async def get(self) -> str | None:
        return await self.redis.get(self.key)

    async def set(self, value: str) -> None:
        await self.redis.set(self.key, value)


@dataclass
class ResetOutcome:
    today: str
    last_reset: str | None
    reset_applied: bool = False
    items_reset: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class DailyReset:
    def __init__(self, store: MarkerStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or Clock()

    async def status(self) -> ResetOutcome:
        return ResetOutcome(today=self.clock.day_marker(), last_reset=await self.store.get())

    async def check(self, db: AsyncSession) -> ResetOutcome:
        outcome = await self.status()
        if outcome.last_reset == outcome.today:
            return outcome

        logger.info("New day detected (%s, last reset %s). Restoring daily stock.", outcome.today, outcome.last_reset)
        outcome.items_reset = await self._reset(db, outcome.today)
        outcome.reset_applied = True
        return outcome

    async def reset_now(self, db: AsyncSession) -> ResetOutcome:
        """Unconditional reset, e.g. from the admin dashboard."""
        outcome = await self.status()
        outcome.items_reset = await self._reset(db, outcome.today)
        outcome.reset_applied = True
        logger.info("Manual inventory reset: %d items restored", outcome.items_reset)
        return outcome

    async def _reset(self, db: AsyncSession, today: str) -> int:
        try:
            count = await ledger.reset_all(db)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to reset daily stock")
            raise StoreError("Failed to reset daily stock", details=str(exc), code=getattr(exc, "code", None))

        # marker only after the rows are written, so a failed reset is retried next tick
        await self.store.set(today)
        await publish_event(MENU_CHANNEL, {"event": "RESET", "day": today, "items": count})
        return count
