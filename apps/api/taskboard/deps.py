from __future__ import annotations

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.db import SessionLocal
from taskboard.errors import UnauthenticatedError


async def get_db() -> AsyncSession:
  async with SessionLocal() as session:
    yield session


def get_caller_id(request: Request) -> int:
  user_id = getattr(request.state, "user_id", None)
  if user_id is None:
    raise UnauthenticatedError("Authentication required")
  return user_id


def client_ip(request: Request) -> str:
  return request.client.host if request.client else "unknown"
