from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.config import settings


def _engine_kwargs(url: str) -> dict:
  u = make_url(url)
  if u.get_backend_name() != "sqlite":
    return {"pool_pre_ping": True}
  if u.database in (None, "", ":memory:"):
    # one shared connection, otherwise every checkout sees a fresh empty database
    return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
  return {"connect_args": {"check_same_thread": False}}


engine = create_async_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
