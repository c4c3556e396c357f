import logging
from typing import AsyncGenerator
from urllib.parse import quote_plus

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from marketplace.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def get_async_database_url() -> str:
    """Build the async database URL"""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    host = settings.DB_HOST or "localhost"
    port = settings.DB_PORT or 5432
    user = settings.DB_USER or "postgres"
    database = settings.DB_NAME
    password = settings.DB_PASSWORD

    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    # Escape special characters in credentials
    encoded_user = quote_plus(user)

    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine():
    """Create the async database engine"""
    try:
        database_url = get_async_database_url()

        base_config = {
            "echo": settings.DB_ECHO,
            "pool_pre_ping": True,
        }

        if settings.DEBUG:
            # Development: no pooling
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config = {
                **base_config,
                "poolclass": NullPool,
            }
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config = {
                **base_config,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
            }

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


async_engine = create_async_database_engine()

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped async session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
