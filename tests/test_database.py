from __future__ import annotations

from preview_api.config import Settings
from preview_api.database import engine_options


def test_asyncpg_connections_are_bounded() -> None:
    settings = Settings(
        _env_file=None,
        database_url="postgresql+asyncpg://u:p@db:5432/cache",
        database_connect_timeout_seconds=2.5,
    )
    assert engine_options(settings)["connect_args"] == {"timeout": 2.5}


def test_other_drivers_get_no_connect_args() -> None:
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///cache.db")
    assert "connect_args" not in engine_options(settings)
