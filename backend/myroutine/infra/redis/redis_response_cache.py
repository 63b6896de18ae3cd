from __future__ import annotations

import json
import logging
from typing import Any

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

log = logging.getLogger(__name__)


class RedisResponseCache:
    """
    Per-user cache of JSON GET responses.

    Keys are ``cache:{user_id}:{full_path}``; every mutating request of a user
    drops all of that user's keys. Redis failures degrade to a cache miss.
    """

    def __init__(self, r: redis.Redis, *, ttl: int = 60) -> None:
        self.r = r
        self.ttl = ttl

    @staticmethod
    def _k(user_id: int, path: str) -> str:
        return f"cache:{user_id}:{path}"

    def get(self, user_id: int, path: str) -> Any | None:
        try:
            raw = self.r.get(self._k(user_id, path))
        except RedisError:
            log.warning("Response cache read failed", exc_info=True)
            return None
        return json.loads(raw) if raw is not None else None

    def set(self, user_id: int, path: str, payload: Any) -> None:
        try:
            self.r.set(self._k(user_id, path), json.dumps(payload, default=str), ex=self.ttl)
        except RedisError:
            log.warning("Response cache write failed", exc_info=True)

    def invalidate_user(self, user_id: int) -> int:
        """Drop every cached response of ``user_id``; return the key count."""
        try:
            keys = list(self.r.scan_iter(match=f"cache:{user_id}:*"))
            if keys:
                self.r.delete(*keys)
            return len(keys)
        except RedisError:
            log.warning("Response cache invalidation failed", exc_info=True)
            return 0
