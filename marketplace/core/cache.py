from typing import Any, Optional
import json
import logging
import redis
from marketplace.core.config import settings

logger = logging.getLogger(__name__)

redis_client = (
    redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    if settings.REDIS_URL
    else None
)

def set_cache(key: str, value: Any, expire: int = settings.CACHE_EXPIRE_SECONDS) -> bool:
    """
    Set a cache value with expiration time
    """
    if redis_client is None:
        return False
    try:
        redis_client.setex(key, expire, json.dumps(value))
        return True
    except redis.RedisError:
        logger.warning("Could not write cache key %s", key, exc_info=True)
        return False

def get_cache(key: str) -> Optional[Any]:
    """
    Get a cached value
    """
    if redis_client is None:
        return None
    try:
        data = redis_client.get(key)
        return json.loads(data) if data else None
    except redis.RedisError:
        logger.warning("Could not read cache key %s", key, exc_info=True)
        return None

def clear_cache_pattern(pattern: str) -> bool:
    """
    Clear all cache keys matching a pattern
    """
    if redis_client is None:
        return False
    try:
        keys = redis_client.keys(pattern)
        if keys:
            redis_client.delete(*keys)
        return True
    except redis.RedisError:
        logger.warning("Could not clear cache pattern %s", pattern, exc_info=True)
        return False

def blacklist_token(token: str, ttl: int) -> bool:
    if redis_client is None:
        logger.warning("Token blacklist unavailable, logout is client side only")
        return False
    try:
        redis_client.setex(f"blacklist:{token}", max(ttl, 1), "true")
        return True
    except redis.RedisError:
        logger.warning("Could not blacklist token", exc_info=True)
        return False

def is_token_blacklisted(token: str) -> bool:
    if redis_client is None:
        return False
    try:
        return bool(redis_client.get(f"blacklist:{token}"))
    except redis.RedisError:
        logger.warning("Could not check token blacklist", exc_info=True)
        return False
