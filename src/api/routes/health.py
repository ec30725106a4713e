"""Health check routes."""

import asyncpg
from fastapi import APIRouter
from loguru import logger

from src.connections.postgres import get_postgres
from src.matching import RepositoryUnavailableError

health_log = logger.bind(module="Health")

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> dict:
    """Health check endpoint, including registration store reachability."""
    try:
        postgres = await get_postgres()
        async with postgres.pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        database = True
    except (
        RepositoryUnavailableError,
        asyncpg.PostgresError,
        asyncpg.InterfaceError,
        OSError,
    ) as e:
        health_log.warning(f"Registration store unreachable: {e}")
        database = False
    return {"status": True, "database": database}
