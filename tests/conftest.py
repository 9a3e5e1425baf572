"""
Shared fixtures: in-memory SQLite per test, fakeredis in place of Redis,
and an httpx client bound to the ASGI app.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("RESET_ON_STARTUP", "false")
os.environ.setdefault("RAZORPAY_KEY_ID", "")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "")

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ordering.core import redis_client
from ordering.core.security import ADMIN_ROLE, create_access_token
from ordering.db.database import Base, get_db
from ordering.main import app
from ordering.models.inventory import MenuItem

CUSTOMER_EMAIL = "asha.rao@gmail.com"


@pytest.fixture(autouse=True)
def redis(monkeypatch):
    # fresh server per test so keys never leak between tests
    fake = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    monkeypatch.setattr(redis_client, "_redis_client", fake)
    return fake


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_item(session_factory):
    """Insert a menu item in its own session and return its id."""
    async def _make(name: str, available_count: int = 12, **fields) -> str:
        async with session_factory() as session:
            item = MenuItem(
                name=name,
                category=fields.pop("category", "Rolls"),
                price=fields.pop("price", ["₹100"]),
                available_count=available_count,
                daily_cap=fields.pop("daily_cap", 12),
                **fields,
            )
            session.add(item)
            await session.commit()
            return item.id
    return _make


@pytest.fixture
def stock_of(session_factory):
    """Read an item's current count through a fresh session."""
    async def _read(item_id: str) -> int:
        async with session_factory() as session:
            item = await session.get(MenuItem, item_id)
            return item.available_count
    return _read


@pytest.fixture
def customer_headers() -> dict[str, str]:
    token = create_access_token({"sub": "customer-001", "email": CUSTOMER_EMAIL})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = create_access_token({"sub": "admin@harveyscafe.com", "role": ADMIN_ROLE})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def order_payload():
    def _payload(items: list[dict], total: float | None = None) -> dict:
        subtotal = sum(float(str(i["price"]).lstrip("₹")) * i["quantity"] for i in items)
        total = subtotal if total is None else total
        return {
            "items": items,
            "userDetails": {"name": "Asha Rao", "email": CUSTOMER_EMAIL, "phone": "9876543210"},
            "visitTime": "2026-10-19T13:30",
            "subtotal": subtotal,
            "advanceAmount": round(total / 2, 2),
            "remainingAmount": round(total - round(total / 2, 2), 2),
            "totalAmount": total,
        }
    return _payload
