from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.api.deps import get_note_cache
from notekeeper.core.config import settings
from notekeeper.core.db import get_db
from notekeeper.infrastructure.cache import CacheLayer

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Проверка работоспособности сервиса"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "notes-api",
        "version": settings.app_version
    }


@router.get("/db")
async def health_db(db: AsyncSession = Depends(get_db)):
    """Проверка подключения к базе данных"""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(status_code=503, content={"database": "unavailable"})
    return {"database": "connected"}


@router.get("/cache")
async def health_cache(cache: CacheLayer = Depends(get_note_cache)):
    """Проверка подключения к кэшу (сбой кэша не ломает сервис)"""
    return {
        "cache": "connected" if await cache.ping() else "unavailable",
        "backend": cache.backend
    }
