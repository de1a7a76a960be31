from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from notekeeper.core.config import settings

# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.database_echo)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def create_schema() -> None:
    """Создание таблиц, если их еще нет"""
    from notekeeper.db.base import Base
    import notekeeper.db.models  # noqa: F401  регистрирует модели в metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
