"""
Ordering Service — Idempotency Key Middleware

Order ids are time + random suffix, so a double-submitted checkout would
create two orders and decrement stock twice. Clients send an
Idempotency-Key header; within the TTL the first response is replayed.
  - Cache hit  → return cached response immediately (no business logic)
  - Cache miss → execute handler, store response in Redis
"""
import json
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ordering.core.config import get_settings
from ordering.core.redis_client import get_redis

settings = get_settings()

IDEMPOTENCY_PREFIX = "idempotent:"
IDEMPOTENCY_METHODS = {"POST"}
IDEMPOTENCY_PATHS = {"/orders", "/orders/", "/payments/orders", "/payments/orders/"}


class IdempotencyMiddleware(BaseHTTPMiddleware):
    """
    Applies to order and payment-order creation. Keys are scoped to the
    authenticated subject so two customers cannot collide.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method not in IDEMPOTENCY_METHODS:
            return await call_next(request)

        if request.url.path not in IDEMPOTENCY_PATHS:
            return await call_next(request)

        idem_key = request.headers.get("Idempotency-Key")
        if not idem_key:
            return await call_next(request)

        user = getattr(request.state, "user", None) or {}
        redis = get_redis()
        cache_key = f"{IDEMPOTENCY_PREFIX}{user.get('sub', 'anonymous')}:{request.url.path.rstrip('/')}:{idem_key}"

        cached = await redis.get(cache_key)
        if cached:
            data = json.loads(cached)
            return JSONResponse(
                content=data["body"],
                status_code=data["status_code"],
                headers={"X-Idempotency-Replay": "true"},
            )

        response = await call_next(request)

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            body = json.loads(body_bytes)
        except ValueError:
            body = body_bytes.decode("utf-8", errors="replace")

        if response.status_code < 500:
            await redis.setex(
                cache_key,
                settings.IDEMPOTENCY_KEY_TTL_SECONDS,
                json.dumps({"body": body, "status_code": response.status_code}),
            )

        return Response(
            content=body_bytes,
            status_code=response.status_code,
            media_type=response.media_type,
            headers=dict(response.headers),
        )
