"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from charity_cms.configs import file_logger, settings
from charity_cms.errors.base import BaseAppError

logger = file_logger(getLogger(__name__))


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_timeout=settings.POOL_TIMEOUT,
    pool_recycle=settings.POOL_RECYCLE,
    pool_pre_ping=True,
    connect_args={
        "command_timeout": settings.STATEMENT_TIMEOUT_MS / 1000,
        "server_settings": {
            "statement_timeout": str(settings.STATEMENT_TIMEOUT_MS),
            "lock_timeout": str(settings.STATEMENT_TIMEOUT_MS),
        },
    },
)

if settings.DEBUG:
    _configure_engine_events(engine)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    One session per request. Services commit explicitly where ordering
    matters (before image cleanup); anything still pending is committed
    here on a clean exit and rolled back on error.

    Yields:
        AsyncSession: Database session
    """
    async with transaction() as session:
        yield session


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """
    Context manager for explicit transaction management.

    Yields:
        AsyncSession: Database session within a transaction
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseAppError as e:
            await session.rollback()
            logger.debug(f"Transaction rolled back: {e.kind} ({e.status_code})")
            raise
        except Exception:
            await session.rollback()
            logger.exception("Transaction error")
            raise
        finally:
            await session.close()


async def ping_db() -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database ping failed: {e}")
        return False
    return True


async def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in SQLModel models. Intended for development;
    production schemas are managed by Alembic.
    """
    async with engine.begin() as conn:
        # Import all models to ensure they are registered
        from charity_cms.models import AuthorDB, PostDB  # noqa: F401, PLC0415

        await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database initialized successfully!")


async def close_db() -> None:
    """Close database connections on application shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
