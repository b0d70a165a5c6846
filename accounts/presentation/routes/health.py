import logging

import psycopg
from fastapi import APIRouter, Depends, HTTPException
from psycopg_pool import AsyncConnectionPool

from accounts.presentation.dependencies import get_db_pool

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz(pool: AsyncConnectionPool = Depends(get_db_pool)) -> dict:
    try:
        async with pool.connection() as conn:
            await conn.execute("SELECT 1")
    except psycopg.Error as e:
        logger.warning("health check: database unreachable", extra={"error": str(e)})
        raise HTTPException(status_code=503, detail="database unavailable") from e
    return {"status": "ok", "database": "ok"}
