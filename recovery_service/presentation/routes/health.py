import logging

from fastapi import APIRouter, Response, status
from psycopg import Error as PsycopgError
from psycopg_pool import PoolTimeout
from redis.exceptions import RedisError

from recovery_service.infrastructure.db.pool import get_pool
from recovery_service.infrastructure.redis_cache.pool import get_redis

logger = logging.getLogger(__name__)

router = APIRouter()


async def _check_redis() -> bool:
    try:
        return bool(await get_redis().ping())
    except RedisError as e:
        logger.warning("health: redis check failed", extra={"error": str(e)})
        return False


async def _check_database() -> bool:
    try:
        async with get_pool().connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1;")
                await cur.fetchone()
        return True
    except (PsycopgError, PoolTimeout) as e:
        logger.warning("health: database check failed", extra={"error": str(e)})
        return False


@router.get("/healthz")
async def healthz(response: Response) -> dict:
    checks = {
        "code_store": await _check_redis(),
        "account_store": await _check_database(),
    }
    healthy = all(checks.values())
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ok" if healthy else "degraded",
        "checks": {name: "ok" if ok else "down" for name, ok in checks.items()},
    }
