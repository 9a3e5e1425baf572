"""
Ordering Service — FastAPI application entrypoint
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from redis.exceptions import RedisError

from ordering.core.config import get_settings
from ordering.core.errors import OrderingError, register_exception_handlers
from ordering.core.redis_client import close_redis
from ordering.db.database import engine, Base, SessionLocal
from ordering.middleware.auth import JWTAuthMiddleware
from ordering.middleware.idempotency import IdempotencyMiddleware
from ordering.middleware.rate_limiter import SlidingWindowRateLimiter
from ordering.api import admin_inventory, admin_orders, auth, cart, health, menu, orders, payments
from ordering.api.deps import get_daily_reset

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def run_startup_reset_check() -> None:
    """Restore stock at start-up if the service missed a day boundary."""
    try:
        async with SessionLocal() as db:
            outcome = await get_daily_reset().check(db)
        if outcome.reset_applied:
            logger.info("Start-up reset restored %d items for %s", outcome.items_reset, outcome.today)
    except (OrderingError, RedisError) as exc:
        logger.error("Start-up inventory reset check failed: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables (migrations handle schema changes in production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.RESET_ON_STARTUP:
        await run_startup_reset_check()
    yield
    # Shutdown
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="Harvey's Cafe Ordering Service",
    description="Menu, cart, order intake with best-effort stock decrement, admin approval and daily stock reset.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last added runs first: auth sets request.state.user before idempotency keys on it
app.add_middleware(IdempotencyMiddleware)
app.add_middleware(SlidingWindowRateLimiter)
app.add_middleware(JWTAuthMiddleware)

register_exception_handlers(app)

if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(auth.router)
app.include_router(menu.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(payments.router)
app.include_router(admin_orders.router)
app.include_router(admin_inventory.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}
