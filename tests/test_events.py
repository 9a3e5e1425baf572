"""
Real-time change streams: Redis pub/sub relayed as Server-Sent Events.
"""
import json

import pytest

from ordering.core import events


class _StubRequest:
    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self) -> bool:
        return self.disconnected


async def _next_event(stream, attempts: int = 10) -> str:
    for _ in range(attempts):
        chunk = await stream.__anext__()
        if chunk.startswith("event:"):
            return chunk
    raise AssertionError("no event received from the stream")


@pytest.mark.asyncio
async def test_stock_change_is_relayed_as_sse_event(monkeypatch):
    monkeypatch.setattr(events.settings, "SSE_KEEPALIVE_INTERVAL_SECONDS", 0)
    request = _StubRequest()
    stream = events.sse_events(events.MENU_CHANNEL, request)

    assert await stream.__anext__() == f": connected to {events.MENU_CHANNEL}\n\n"
    assert (await stream.__anext__()).startswith("retry: ")

    await events.publish_stock_change("item-1", "Veg Roll", 4)
    chunk = await _next_event(stream)

    header, data, _ = chunk.split("\n", 2)
    assert header == "event: UPDATE"
    assert json.loads(data.removeprefix("data: ")) == {
        "event": "UPDATE", "id": "item-1", "name": "Veg Roll", "available_count": 4,
    }

    request.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()


@pytest.mark.asyncio
async def test_order_events_stay_on_their_own_channel(monkeypatch):
    monkeypatch.setattr(events.settings, "SSE_KEEPALIVE_INTERVAL_SECONDS", 0)
    stream = events.sse_events(events.ORDERS_CHANNEL, _StubRequest())
    await stream.__anext__()
    await stream.__anext__()

    await events.publish_stock_change("item-1", "Veg Roll", 4)
    await events.publish_event(events.ORDERS_CHANNEL, {"event": "INSERT", "id": "ORD_1_abc"})
    chunk = await _next_event(stream)

    assert chunk.startswith("event: INSERT\n")
    assert '"ORD_1_abc"' in chunk
    await stream.aclose()


@pytest.mark.asyncio
async def test_publish_failure_is_not_raised(monkeypatch):
    class _DownRedis:
        async def publish(self, channel, message):
            raise ConnectionRefusedError("redis down")

    monkeypatch.setattr(events, "get_redis", lambda: _DownRedis())

    await events.publish_stock_change("item-1", "Veg Roll", 4)


@pytest.mark.asyncio
async def test_order_stream_requires_admin(client, customer_headers):
    assert (await client.get("/admin/orders/stream")).status_code == 401
    assert (await client.get("/admin/orders/stream", headers=customer_headers)).status_code == 403
