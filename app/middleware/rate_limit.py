"""
Rate limit middleware: Redis sliding window, key theo client IP.
Default 100 req / 15 min (RATE_LIMIT_REQUESTS / RATE_LIMIT_WINDOW_SECONDS).
Khi không có REDIS_URL hoặc Redis lỗi thì bỏ qua (không block).
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import get_settings
from app.logging_config import get_logger

logger = get_logger(__name__)

REDIS_KEY_PREFIX = "rl:"
EXEMPT_PATHS = frozenset({"/api/health", "/api/readyz"})


def _rate_limit_key(request: Request, trusted_proxy_hops: int = 0) -> Optional[str]:
    """
    Client IP from the socket. With trusted_proxy_hops=n (n proxies in front of the app),
    the n-th X-Forwarded-For entry from the right is used instead; entries left of it
    are client-supplied and never trusted.
    """
    if trusted_proxy_hops > 0:
        hops = [h.strip() for h in request.headers.get("X-Forwarded-For", "").split(",") if h.strip()]
        if len(hops) >= trusted_proxy_hops:
            return f"ip:{hops[-trusted_proxy_hops]}"
    if request.client and request.client.host:
        return f"ip:{request.client.host}"
    return None


async def _check_sliding_window(redis_url: str, key: str, limit: int, window_seconds: int) -> bool:
    """
    Sliding window: ZADD now, ZREMRANGEBYSCORE -inf (now-window), ZCARD.
    Returns True nếu cho phép request (dưới limit), False nếu vượt.
    """
    now = time.time()
    rkey = REDIS_KEY_PREFIX + key
    try:
        client = Redis.from_url(redis_url, decode_responses=True)
        try:
            pipe = client.pipeline()
            pipe.zadd(rkey, {str(uuid.uuid4()): now})
            pipe.zremrangebyscore(rkey, "-inf", now - window_seconds)
            pipe.zcard(rkey)
            pipe.expire(rkey, window_seconds + 10)
            results = await pipe.execute()
            count = results[2] if len(results) > 2 else 0
            return count <= limit
        finally:
            await client.aclose()
    except Exception as e:
        logger.warning("rate_limit.redis_error", key=key, error=str(e))
        return True


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware: rate limit theo client IP (Redis sliding window)."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        if not settings.redis_url or request.url.path in EXEMPT_PATHS:
            return await call_next(request)
        key = _rate_limit_key(request, settings.trusted_proxy_hops)
        if not key:
            return await call_next(request)
        limit = settings.rate_limit_requests
        allowed = await _check_sliding_window(
            settings.redis_url, key, limit, settings.rate_limit_window_seconds
        )
        if not allowed:
            logger.info("rate_limit.exceeded", key=key, limit=limit)
            return Response(
                content='{"success":false,"message":"Too many requests, please try again later."}',
                status_code=429,
                media_type="application/json",
            )
        return await call_next(request)
