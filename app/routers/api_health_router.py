# Health: /api/health (liveness), /api/readyz (readiness: DB + optional Redis).
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.config import get_settings
from app.logging_config import get_logger
from app.schemas.common import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness: always 200 while the process is up."""
    return HealthResponse(message="Server is running", timestamp=datetime.now(timezone.utc))


@router.get("/readyz")
async def readyz(db: AsyncSession = Depends(get_db)):
    """Readiness: DB reachable, Redis too when REDIS_URL is set. 503 otherwise."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("readyz.db_fail", error=str(e))
        return JSONResponse(
            status_code=503,
            content={"success": False, "status": "unhealthy", "db": "fail"},
        )

    settings = get_settings()
    redis_status = "skipped"
    if settings.redis_url:
        try:
            from redis.asyncio import Redis
            client = Redis.from_url(settings.redis_url, decode_responses=True)
            await client.ping()
            await client.aclose()
            redis_status = "ok"
        except Exception as e:
            logger.warning("readyz.redis_fail", error=str(e))
            return JSONResponse(
                status_code=503,
                content={"success": False, "status": "unhealthy", "redis": "fail"},
            )

    return {"success": True, "status": "ok", "db": "ok", "redis": redis_status}
