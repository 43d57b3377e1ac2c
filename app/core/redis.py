# app/core/redis.py

import logging

from redis import asyncio as aioredis

logger = logging.getLogger(__name__)


def build_redis_client(url: str) -> aioredis.Redis:
    """Create the async redis client; no connection is opened until first use."""
    logger.debug(f"Configuring redis client for {url}")
    return aioredis.from_url(url, decode_responses=True)
