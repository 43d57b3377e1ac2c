"""
Tests for the fixed-window rate limiter and its route dependency.
"""
import asyncio

from conftest import BrokenRedis, FakeRedis, with_limit
from app.core.rate_limit import FixedWindowRateLimiter


def hits(limiter, key, count, now=1000.0):
    async def _run():
        return [await limiter.hit(key, now=now) for _ in range(count)]

    return asyncio.run(_run())


class TestFixedWindow:
    def test_allows_up_to_the_limit(self):
        limiter = FixedWindowRateLimiter(FakeRedis(), limit=3, window_seconds=60)
        assert hits(limiter, "10.0.0.1", 4) == [True, True, True, False]

    def test_keys_are_independent(self):
        limiter = FixedWindowRateLimiter(FakeRedis(), limit=1, window_seconds=60)
        assert hits(limiter, "10.0.0.1", 1) == [True]
        assert hits(limiter, "10.0.0.2", 1) == [True]

    def test_new_window_resets_the_count(self):
        limiter = FixedWindowRateLimiter(FakeRedis(), limit=1, window_seconds=60)
        assert hits(limiter, "10.0.0.1", 2, now=0.0) == [True, False]
        assert hits(limiter, "10.0.0.1", 1, now=60.0) == [True]

    def test_expiry_set_on_first_hit(self):
        redis = FakeRedis()
        limiter = FixedWindowRateLimiter(redis, limit=5, window_seconds=900)
        hits(limiter, "10.0.0.1", 2, now=0.0)
        assert redis.ttls == {"ratelimit:10.0.0.1:0": 900}

    def test_redis_failure_allows_requests(self):
        limiter = FixedWindowRateLimiter(BrokenRedis(), limit=1, window_seconds=60)
        assert hits(limiter, "10.0.0.1", 3) == [True, True, True]


class TestRouteDependency:
    def test_too_many_requests(self, make_client, settings):
        client = make_client(with_limit(settings, 2))
        assert client.get("/badges").status_code == 200
        assert client.get("/requirements", params={"badge_id": 1}).status_code == 200

        response = client.get("/badges")
        assert response.status_code == 429
        assert response.json() == {"message": "Too many requests, please try again later."}

    def test_health_is_not_limited(self, make_client, settings):
        client = make_client(with_limit(settings, 1))
        for _ in range(3):
            assert client.get("/health").status_code == 200

    def test_unavailable_backend_does_not_block(self, make_client, settings):
        client = make_client(with_limit(settings, 1), redis=BrokenRedis())
        for _ in range(3):
            assert client.get("/badges").status_code == 200
