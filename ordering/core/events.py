"""
Ordering Service — Real-time change events (Redis pub/sub + SSE)

Inventory and order writes publish a JSON event on a Redis channel; the
menu page and the admin dashboard keep an EventSource open on the matching
SSE endpoint and merge incoming events into their displayed state.
"""
import asyncio
import json
import logging
from typing import Any, AsyncGenerator

from fastapi import Request
from redis.exceptions import RedisError

from ordering.core.config import get_settings
from ordering.core.redis_client import get_redis

settings = get_settings()
logger = logging.getLogger(__name__)

MENU_CHANNEL = "menu_items:changes"
ORDERS_CHANNEL = "orders:changes"


async def publish_event(channel: str, payload: dict[str, Any]) -> None:
    """Publish a change event. Publish failures never fail the caller's write."""
    try:
        await get_redis().publish(channel, json.dumps(payload, default=str))
    except (RedisError, OSError) as exc:
        logger.warning("Could not publish event on %s: %s", channel, exc)


async def publish_stock_change(item_id: str, name: str, available_count: int) -> None:
    await publish_event(
        MENU_CHANNEL,
        {"event": "UPDATE", "id": item_id, "name": name, "available_count": available_count},
    )


async def sse_events(channel: str, request: Request) -> AsyncGenerator[str, None]:
    """Subscribe to a Redis channel and yield its messages as SSE events."""
    redis = get_redis()
    pubsub = redis.pubsub()
    await pubsub.subscribe(channel)

    try:
        yield f": connected to {channel}\n\n"
        yield f"retry: {settings.SSE_RETRY_MILLISECONDS}\n\n"

        while True:
            if await request.is_disconnected():
                break

            message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            if message and message["type"] == "message":
                data = message["data"]
                try:
                    payload = json.loads(data)
                except ValueError:
                    payload = {"raw": data}
                event = payload.get("event", "message")
                yield f"event: {event}\ndata: {json.dumps(payload)}\n\n"
            else:
                yield ": keepalive\n\n"
                await asyncio.sleep(settings.SSE_KEEPALIVE_INTERVAL_SECONDS)
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()
