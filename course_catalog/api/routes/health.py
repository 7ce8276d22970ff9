from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter
from redis import asyncio as aioredis
from sqlalchemy import text

from course_catalog.core.config import get_settings
from course_catalog.infrastructure.db.session import get_session_factory

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()

StatusCheck = Callable[[], Awaitable[dict]]


def _failed(exc: Exception, **extra: str) -> dict:
    return {"status": "error", **extra, "message": str(exc)[:100]}


async def check_database() -> dict:
    """Round-trip a trivial query through the insights database."""
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        return _failed(exc)
    return {"status": "ok"}


async def check_rating_cache_store() -> dict:
    """Ping the rating cache's durable store; the file backend needs no probe."""
    settings = get_settings()
    backend = settings.rating_cache_backend
    if backend != "redis":
        return {"status": "ok", "backend": backend}

    client = aioredis.from_url(settings.redis_url)
    try:
        await client.ping()
    except Exception as exc:
        return _failed(exc, backend=backend)
    finally:
        await client.aclose()
    return {"status": "ok", "backend": backend}


DATASTORE_CHECKS: dict[str, StatusCheck] = {
    "database": check_database,
    "rating_cache": check_rating_cache_store,
}


@router.get("/health", summary="Service health probe")
async def health_check() -> dict:
    """Report service metadata and the reachability of each datastore."""
    settings = get_settings()
    datastores = {name: await check() for name, check in DATASTORE_CHECKS.items()}
    healthy = all(result["status"] == "ok" for result in datastores.values())

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": "ok" if healthy else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": datastores,
    }
    logger.info("health_probe", **payload)
    return payload
