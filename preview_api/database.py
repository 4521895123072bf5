from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from preview_api.config import Settings
from preview_api.models.base import Base


def engine_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": False, "future": True}
    if make_url(settings.database_url).get_driver_name() == "asyncpg":
        # asyncpg defaults to 60s per connect attempt.
        options["connect_args"] = {"timeout": settings.database_connect_timeout_seconds}
    return options


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, **engine_options(settings))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
