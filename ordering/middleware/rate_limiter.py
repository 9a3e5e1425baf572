"""
Ordering Service — Sliding window rate limiter for admin login (Redis-backed)

3 login attempts per 60 seconds per email, using a sorted set per key.
"""
import json
import time
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from ordering.core.config import get_settings
from ordering.core.redis_client import get_redis

settings = get_settings()

RATE_LIMIT_PREFIX = "ratelimit:"
LOGIN_PATHS = ("/auth/admin/login", "/auth/admin/login/")


class SlidingWindowRateLimiter(BaseHTTPMiddleware):
    """
    Applies only to POST /auth/admin/login. Key is the email in the body,
    falling back to the client address when the body cannot be parsed.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "POST" and request.url.path in LOGIN_PATHS:
            body = await request.body()
            client_host = request.client.host if request.client else "unknown"
            try:
                data = json.loads(body)
                tracking_key = str(data.get("email") or client_host).lower()
            except (ValueError, AttributeError):
                tracking_key = client_host

            redis = get_redis()
            key = f"{RATE_LIMIT_PREFIX}{tracking_key}"
            now = time.time()
            window_start = now - settings.RATE_LIMIT_WINDOW_SECONDS

            pipe = redis.pipeline()
            pipe.zremrangebyscore(key, "-inf", window_start)
            pipe.zcard(key)
            pipe.zadd(key, {str(now): now})
            pipe.expire(key, settings.RATE_LIMIT_WINDOW_SECONDS + 1)
            results = await pipe.execute()

            attempt_count = results[1]  # count before this attempt

            if attempt_count >= settings.RATE_LIMIT_MAX_ATTEMPTS:
                return JSONResponse(
                    status_code=429,
                    content={
                        "detail": (
                            f"Too many login attempts. Maximum {settings.RATE_LIMIT_MAX_ATTEMPTS} "
                            f"attempts per {settings.RATE_LIMIT_WINDOW_SECONDS} seconds."
                        ),
                        "retry_after_seconds": settings.RATE_LIMIT_WINDOW_SECONDS,
                    },
                    headers={"Retry-After": str(settings.RATE_LIMIT_WINDOW_SECONDS)},
                )

            # Re-attach consumed body so downstream can read it
            async def receive():
                return {"type": "http.request", "body": body, "more_body": False}
            request = StarletteRequest(request.scope, receive)

        return await call_next(request)
