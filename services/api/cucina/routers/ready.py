import logging

from fastapi import APIRouter

from ..infra.redis_client import get_sync_redis
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("cucina.ready")


@router.get("/ready")
def ready():
    redis_ok = False
    if settings.store_backend == "redis":
        try:
            redis_ok = bool(get_sync_redis().ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
    return {"ok": True, "store_backend": settings.store_backend, "redis_ok": redis_ok}
