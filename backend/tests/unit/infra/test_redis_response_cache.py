# tests/unit/infra/test_redis_response_cache.py
from __future__ import annotations

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from myroutine.infra.redis.redis_response_cache import RedisResponseCache


@pytest.fixture()
def cache() -> RedisResponseCache:
    return RedisResponseCache(fakeredis.FakeRedis(), ttl=30)


def test_roundtrip_is_scoped_per_user(cache):
    cache.set(1, "/api/v1/exercise?", {"success": True, "resource": [1]})

    assert cache.get(1, "/api/v1/exercise?") == {"success": True, "resource": [1]}
    assert cache.get(2, "/api/v1/exercise?") is None


def test_entries_carry_ttl(cache):
    cache.set(1, "/p", {"a": 1})

    assert 0 < cache.r.ttl("cache:1:/p") <= 30


def test_invalidate_user_drops_only_that_user(cache):
    cache.set(1, "/a", {})
    cache.set(1, "/b", {})
    cache.set(2, "/a", {})

    assert cache.invalidate_user(1) == 2
    assert cache.get(1, "/a") is None
    assert cache.get(2, "/a") == {}


class _BrokenRedis:
    def get(self, *a, **k):
        raise RedisConnectionError("down")

    set = get

    def scan_iter(self, *a, **k):
        raise RedisConnectionError("down")


def test_redis_failures_degrade_to_miss():
    cache = RedisResponseCache(_BrokenRedis())

    assert cache.get(1, "/a") is None
    cache.set(1, "/a", {"x": 1})
    assert cache.invalidate_user(1) == 0
