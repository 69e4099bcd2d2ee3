from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from campus_chat.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


async def _check_postgres() -> str | None:
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        return f"postgres: {exc}"
    return None


async def _check_redis(request: Request) -> str | None:
    # Only present when notifications go through the Redis stream
    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        return None
    try:
        await redis.ping()
    except Exception as exc:  # noqa: BLE001
        return f"redis: {exc}"
    return None


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    errors = [e for e in (await _check_postgres(), await _check_redis(request)) if e]
    if errors:
        logger.warning("Readiness check failed: %s", "; ".join(errors))
        return JSONResponse(status_code=503, content={"status": "unavailable", "errors": errors})
    return JSONResponse(content={"status": "ready"})
