from redis import Redis

from ..settings import settings

_redis_sync: Redis | None = None

def redis_url() -> str:
    return settings.redis_url

def get_sync_redis() -> Redis:
    global _redis_sync
    if _redis_sync is None:
        _redis_sync = Redis.from_url(redis_url(), decode_responses=True)
    return _redis_sync
