import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..db import get_db
from ..infra.redis_client import get_sync_redis
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("recepti.ready")


@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception as e:
        logger.warning(f"Database not ready: {e}")

    # Redis only matters when it backs the path cache
    redis_ok = None
    if settings.cdn_path_cache_backend.lower() == "redis":
        redis_ok = False
        try:
            redis_ok = bool(get_sync_redis().ping())
        except Exception as e:
            logger.warning(f"Redis not ready: {e}")

    return {"ok": True, "db_ok": db_ok, "redis_ok": redis_ok}
