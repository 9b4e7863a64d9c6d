# app/services/cache.py

from typing import Optional
import hashlib
import json
import logging

from app.utils.redis_client import redis_client

logger = logging.getLogger(__name__)


def make_cache_key(prefix: str, payload: dict) -> str:
    raw = json.dumps(payload, sort_keys=True, default=str)
    digest = hashlib.sha256(raw.encode()).hexdigest()
    return f"{prefix}:{digest}"


class CacheService:
    """
    Read-through Redis cache. Fail-safe: a Redis outage turns reads into
    misses and drops writes.
    """

    def __init__(self, client=None):
        self.client = client if client is not None else redis_client

    def get(self, key: str) -> Optional[dict]:
        try:
            value = self.client.get(key)
            return json.loads(value) if value else None
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None

    def set(self, key: str, value, ttl: int = 60):
        try:
            self.client.setex(key, ttl, json.dumps(value, default=str))
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
