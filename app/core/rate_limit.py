# app/core/rate_limit.py

import logging
import time
from typing import Optional

from fastapi import Request
from redis.exceptions import RedisError

from app.core.exceptions import BadgeFinderError, ErrorKind

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    Counts hits per key in fixed windows of `window_seconds`.
    The counter key carries the window index, so it expires on its own.
    """

    def __init__(self, redis, limit: int, window_seconds: int):
        self.redis = redis
        self.limit = limit
        self.window_seconds = window_seconds

    def _window_key(self, key: str, now: Optional[float] = None) -> str:
        window = int((now if now is not None else time.time()) // self.window_seconds)
        return f"ratelimit:{key}:{window}"

    async def hit(self, key: str, now: Optional[float] = None) -> bool:
        """Record one request for `key`; True while the window is under the limit."""
        window_key = self._window_key(key, now)
        try:
            count = await self.redis.incr(window_key)
            if count == 1:
                await self.redis.expire(window_key, self.window_seconds)
        except (RedisError, OSError) as e:
            logger.warning(f"⚠️  Rate limiter unavailable ({e}) - allowing request")
            return True
        return count <= self.limit


async def rate_limit(request: Request) -> None:
    """FastAPI dependency applied to every router."""
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    client = request.client.host if request.client else "anonymous"
    if not await limiter.hit(client):
        logger.info(f"Rate limit exceeded for {client} on {request.url.path}")
        raise BadgeFinderError(ErrorKind.RATE_LIMITED)
