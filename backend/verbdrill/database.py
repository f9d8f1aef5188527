import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from verbdrill.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Async engine for SQLite
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

# Async session factory
async_session_maker = sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(engine=async_engine):
    """Create all tables in the database."""
    from verbdrill.models.kv import KeyValueEntry  # noqa: F401

    _ensure_sqlite_dir(str(engine.url))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))

