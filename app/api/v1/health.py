import logging

import sentry_sdk
from fastapi import APIRouter, HTTPException, Request
from psycopg2.extras import RealDictCursor
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.database import get_db
from app.utils.redis_client import redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
@limiter.limit("500/minute")
async def health(request: Request):
    try:
        with get_db() as conn:
            cur = conn.cursor(cursor_factory=RealDictCursor)
            cur.execute("SELECT COUNT(*) FROM clinics")
            count = cur.fetchone()["count"]
            cur.close()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        sentry_sdk.capture_exception(e)
        raise HTTPException(503, f"Health check failed: {e}")

    # The cache is optional; search keeps working without it.
    try:
        cache_status = "connected" if redis_client.ping() else "disconnected"
    except Exception as e:
        logger.warning("Redis ping failed: %s", e)
        cache_status = "disconnected"

    return {
        "status": "healthy",
        "clinics_count": count,
        "cache": cache_status,
    }
