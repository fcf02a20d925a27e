from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
import os
from dotenv import load_dotenv

load_dotenv()

DB_URL = os.getenv("DB_URL", "sqlite+aiosqlite:///cards.db")


def make_engine(db_url: str = DB_URL) -> AsyncEngine:
    """Создать движок БД (у SQLite свой пул, настройки пула только для серверных БД)"""
    if db_url.startswith("sqlite"):
        return create_async_engine(db_url, echo=False, future=True)

    return create_async_engine(
        db_url,
        echo=False,
        future=True,
        pool_size=5,  # Размер пула
        max_overflow=10,  # Максимальное количество дополнительных соединений
        pool_pre_ping=True,  # Проверять соединение перед использованием
        pool_recycle=3600  # Пересоздавать соединение через час
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


engine = make_engine()

AsyncSessionLocal = make_session_factory(engine)

Base = declarative_base()


async def init_models(db_engine: AsyncEngine = None):
    """Создать таблицы каталога, если их нет"""
    import database.models  # noqa: F401  регистрирует модели в Base.metadata

    async with (db_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
