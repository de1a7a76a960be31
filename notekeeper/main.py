import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notekeeper.api.http import health_router, notes_router
from notekeeper.core.config import settings
from notekeeper.core.db import create_schema, engine
from notekeeper.core.exceptions import register_exception_handlers
from notekeeper.core.logging import setup_logging
from notekeeper.infrastructure.cache import CacheLayer, build_cache_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Подключение кэша и схемы БД на старте, закрытие на остановке"""
    if settings.create_schema_on_startup:
        await create_schema()

    app.state.note_cache = CacheLayer(
        build_cache_client(settings.redis_url),
        ttl_seconds=settings.note_cache_ttl_seconds,
    )
    logger.info("Note cache backend: %s", app.state.note_cache.backend)
    try:
        yield
    finally:
        await app.state.note_cache.close()
        await engine.dispose()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Заметки с совместным доступом и кэшированием чтения",
        version=settings.app_version,
        lifespan=lifespan
    )

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(notes_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": f"{settings.app_name} API",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
