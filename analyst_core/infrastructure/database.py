from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from ..config.storage_config import DATABASE_URL

Base = declarative_base()


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    # SQLite (tests, local runs) does not accept the pool sizing options
    if make_url(url).get_backend_name() == "sqlite":
        return create_async_engine(url, echo=False)

    return create_async_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_timeout=60,
        pool_pre_ping=True,  # Check connection health before checking out
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine()
AsyncSessionLocal = build_session_factory(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        # Registers the tables on Base.metadata
        from .models import KeyValueEntry  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
