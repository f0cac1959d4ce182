"""
Подключение к базе данных и управление сессиями.

Модуль предоставляет:
- Async engine для SQLite (или другой async-БД по DATABASE_URL)
- Фабрику асинхронных сессий
- Context manager для безопасной работы с сессиями
- Функции инициализации и закрытия БД
- Health check для БД
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from helpdesk_bot.config import settings


logger = structlog.get_logger()


# ============================================================
# КОНФИГУРАЦИЯ CONNECTION POOL
# ============================================================

# Для SQLite используем StaticPool (один коннект, в том числе для :memory:)
POOL_CONFIG = {
    "sqlite": {
        "poolclass": StaticPool,
        "connect_args": {
            "check_same_thread": False,
            "timeout": 30,
        },
    },
    "postgresql": {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    },
}


def get_pool_config() -> Dict[str, Any]:
    """Получить конфигурацию пула для текущей БД."""
    db_url = settings.database_url.lower()

    if "sqlite" in db_url:
        return POOL_CONFIG["sqlite"]
    elif "postgresql" in db_url or "postgres" in db_url:
        return POOL_CONFIG["postgresql"]
    return {"pool_pre_ping": True}


engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    **get_pool_config(),
)

# Фабрика асинхронных сессий
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Порог медленного запроса (мс)
SLOW_QUERY_THRESHOLD_MS = 100.0


async def init_db() -> None:
    """
    Инициализация базы данных.

    Создаёт все таблицы если их нет.
    Вызывается при старте бота.
    """
    # Импорт здесь чтобы избежать circular import
    from database.models import Base

    if "sqlite" in settings.database_url and ":memory:" not in settings.database_url:
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_initialized", url=settings.database_url)


async def drop_db() -> None:
    """Удалить все таблицы (используется тестами)."""
    from database.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """
    Закрытие соединения с базой данных.

    Вызывается при остановке бота для корректного
    освобождения ресурсов.
    """
    await engine.dispose()
    logger.info("database_closed")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Контекстный менеджер для работы с сессией БД.

    Автоматически выполняет commit при успехе и rollback при ошибке.
    Гарантирует закрытие сессии в любом случае.

    Использование:
        async with get_session() as session:
            result = await session.execute(query)

    Yields:
        AsyncSession: Асинхронная сессия SQLAlchemy
    """
    session = async_session_factory()
    start_time = time.time()

    try:
        yield session
        await session.commit()

        duration_ms = (time.time() - start_time) * 1000
        if duration_ms > SLOW_QUERY_THRESHOLD_MS:
            logger.warning(
                "slow_database_operation",
                duration_ms=round(duration_ms, 2),
            )

    except Exception as e:
        await session.rollback()
        logger.error("database_session_error", error=str(e))
        raise
    finally:
        await session.close()


async def health_check() -> Dict[str, Any]:
    """
    Проверка здоровья БД.

    Returns:
        Словарь с результатами проверки
    """
    result = {
        "status": "unknown",
        "latency_ms": None,
        "error": None,
    }

    start_time = time.time()

    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))

        result["status"] = "healthy"
        result["latency_ms"] = round((time.time() - start_time) * 1000, 2)

    except Exception as e:
        result["status"] = "unhealthy"
        result["error"] = str(e)
        logger.error("database_health_check_failed", error=str(e))

    return result
