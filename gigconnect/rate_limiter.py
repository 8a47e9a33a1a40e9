"""
Per-IP rate limiting for public endpoints

Counts are kept in memory and synced to Redis periodically, so most requests
never touch Redis. Disabled unless RATE_LIMIT_ENABLED=true.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request, status

from . import config

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None
# Reconnect attempts are skipped until this time after a failed connection
redis_retry_after = 0.0
REDIS_RETRY_INTERVAL = 30  # seconds

# Format: {key: {"count": int, "reset_time": int, "last_redis_sync": int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

MEMORY_CACHE_SYNC_INTERVAL = 10  # seconds between Redis syncs per key
MEMORY_CACHE_CLEANUP_INTERVAL = 60
last_cleanup_time = 0


def _masked(url: str) -> str:
    if "@" not in url:
        return "****"
    protocol = url.split("@")[0].split(":")[0]
    return f"{protocol}:****@{url.split('@')[1]}"


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client from REDIS_URL or the individual REDIS_* settings"""
    global redis_client, redis_retry_after

    if redis_client is None:
        if time.monotonic() < redis_retry_after:
            raise redis.ConnectionError("Redis unavailable, waiting before reconnecting")

        options = {
            "decode_responses": True,
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
            "retry_on_timeout": True,
            "health_check_interval": 30,
            "max_connections": 20,
        }

        if config.REDIS_URL:
            logger.info(f"📡 Using Redis URL connection: {_masked(config.REDIS_URL)}")
            client = redis.from_url(config.REDIS_URL, **options)
        else:
            logger.info(f"📡 Using Redis at {config.REDIS_HOST}:{config.REDIS_PORT} (db {config.REDIS_DB})")
            client = redis.Redis(
                host=config.REDIS_HOST,
                port=config.REDIS_PORT,
                password=config.REDIS_PASSWORD,
                db=config.REDIS_DB,
                ssl=config.REDIS_SSL,
                **options,
            )

        try:
            client.ping()
        except Exception as e:
            logger.error(f"❌ Failed to connect to Redis: {str(e)}")
            redis_retry_after = time.monotonic() + REDIS_RETRY_INTERVAL
            raise

        redis_client = client
        logger.info("Redis connected successfully")

    return redis_client


def cleanup_expired_cache(now: Optional[int] = None) -> None:
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = now if now is not None else int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [k for k, v in memory_cache.items() if current_time >= v.get("reset_time", 0)]
        for k in expired_keys:
            del memory_cache[k]

        if expired_keys:
            logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired rate limit entries")

    last_cleanup_time = current_time


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis, now: Optional[int] = None
) -> tuple[bool, int, int]:
    """Count one request against ``key``.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    current_time = now if now is not None else int(time.time())
    cleanup_expired_cache(current_time)

    with cache_lock:
        if key not in memory_cache:
            entry = {"count": 0, "reset_time": current_time + window_seconds, "last_redis_sync": current_time}
            try:
                redis_count = client.get(key)
                redis_ttl = client.ttl(key)
                if redis_count and redis_ttl > 0:
                    entry["count"] = int(redis_count)
                    entry["reset_time"] = current_time + redis_ttl
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to load {key} from Redis, using memory only: {e}")
            memory_cache[key] = entry

        entry = memory_cache[key]

        if current_time >= entry["reset_time"]:
            entry["count"] = 0
            entry["reset_time"] = current_time + window_seconds
            entry["last_redis_sync"] = 0

        is_allowed = entry["count"] < limit
        if is_allowed:
            entry["count"] += 1

        if current_time - entry.get("last_redis_sync", 0) >= MEMORY_CACHE_SYNC_INTERVAL:
            try:
                client.set(key, entry["count"], ex=window_seconds)
                entry["last_redis_sync"] = current_time
                logger.debug(f"📡 Synced {key} to Redis: {entry['count']}/{limit}")
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to sync {key} to Redis: {e}")

        ttl = entry["reset_time"] - current_time
        return is_allowed, entry["count"], max(0, ttl)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit_dependency(
    request: Request,
    limit: int,
    window_seconds: int,
    key_prefix: str = "rate_limit",
    fail_open: bool = False,
):
    """
    FastAPI dependency for rate limiting; sync so Redis round-trips run in the threadpool

    Args:
        request: FastAPI request object
        limit: Maximum requests allowed per window
        window_seconds: Time window in seconds
        key_prefix: Prefix for the Redis key
        fail_open: Allow the request when Redis is unreachable instead of returning 503
    """
    if not config.RATE_LIMIT_ENABLED:
        return

    key = f"{key_prefix}:{client_ip(request)}"

    try:
        client = get_redis_client()
    except Exception as e:
        if fail_open:
            logger.warning(f"⚠️ Rate limiting unavailable, allowing request ({key}): {e}")
            return
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiting service temporarily unavailable",
        ) from e

    is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds, client)

    if not is_allowed:
        logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests used")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": ttl,
                "limit": limit,
                "window_seconds": window_seconds,
            },
            headers={"Retry-After": str(ttl)},
        )

    request.state.rate_limit_remaining = limit - current_count
    request.state.rate_limit_limit = limit
    request.state.rate_limit_reset = int(time.time()) + ttl


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit", fail_open: bool = False):
    """
    Create a rate limiter dependency with specific parameters

    Example usage:
        catalog_rate_limit = create_rate_limiter(limit=120, window_seconds=60, key_prefix="catalog")

        router = APIRouter(dependencies=[Depends(catalog_rate_limit)])
    """

    def rate_limiter(request: Request):
        return rate_limit_dependency(request, limit, window_seconds, key_prefix, fail_open)

    return rate_limiter
