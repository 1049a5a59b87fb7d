from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator
import logging

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

import config
from models.base import Base
# Registers the order table on Base.metadata
from models.order import Order  # noqa: F401

logger = logging.getLogger(__name__)

# SQL echo stays off, statements would drown the order logs
sql_echo = False

engine = create_async_engine(config.DB_URL, echo=sql_echo)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db_session(maker: async_sessionmaker | None = None) -> AsyncGenerator[AsyncSession, None]:
    async with (maker or session_maker)() as session:
        try:
            yield session
        finally:
            await session.close()


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    return await session.execute(stmt)


async def session_commit(session: AsyncSession) -> None:
    await session.commit()


async def session_refresh(session: AsyncSession, instance: Any) -> None:
    await session.refresh(instance)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if "sqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def create_db_and_tables(db_engine=None):
    """Create the order tables (and the local data folder for file-based SQLite)."""
    db_engine = db_engine or engine
    if db_engine.url.drivername.startswith("sqlite") and db_engine.url.database not in (None, "", ":memory:"):
        Path(db_engine.url.database).parent.mkdir(parents=True, exist_ok=True)
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Order tables ready ({db_engine.url.drivername})")
