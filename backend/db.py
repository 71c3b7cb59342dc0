from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from backend.settings import get_settings

logger = logging.getLogger(__name__)

# Hosted providers hand out plain postgres URLs; the service always talks asyncpg.
ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}
LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def normalize_database_url(database_url: str) -> str:
    url = str(database_url or "").strip()
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url
    return f"{ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    options: dict = {"pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        return options
    options.update({"pool_size": 20, "max_overflow": 10})
    if url.host and url.host not in LOCAL_HOSTS:
        options["connect_args"] = {"ssl": True}
    return options


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        db_url = normalize_database_url(get_settings().database_url)
        logger.info("Opening database engine for %s", make_url(db_url).get_backend_name())
        _engine = create_async_engine(db_url, **engine_options(db_url))
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
