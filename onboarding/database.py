"""
Database engine and session factory.
Uses SQLAlchemy 2.0 async pattern.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from onboarding.config import get_settings
from onboarding.kernel.persistence.unit_of_work import UnitOfWork

settings = get_settings()


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with the options suited to its backend."""
    if database_url.startswith("sqlite"):
        # NullPool: every session gets its own connection, avoiding
        # "cannot commit transaction - SQL statements in progress" from StaticPool.
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable WAL mode + foreign keys on every new SQLite connection."""
            # Driver-managed BEGIN is deferred to the first write; take control of it
            dbapi_conn.isolation_level = None
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            """Take the write lock before the first read so transactions serialize."""
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    # PostgreSQL settings with connection pooling
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine_for(settings.database_url, echo=settings.debug)
async_session_maker = create_session_maker(engine)


def get_unit_of_work() -> UnitOfWork:
    """Unit of work bound to the application engine."""
    return UnitOfWork(async_session_maker)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create tables that do not exist yet."""
    from onboarding.kernel.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
