from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef-0123456789")

from taskboard.config import settings
from taskboard.db import SessionLocal, engine
from taskboard.main import app
from taskboard.models import Base
from taskboard.rate_limit import login_throttle


@pytest.fixture(scope="session")
def anyio_backend() -> str:
  return "asyncio"


async def _reset_db() -> None:
  if not settings.is_test_database():
    raise RuntimeError(
      "Refusing to run destructive tests against non-test DB. "
      "Set DATABASE_URL to sqlite or a *_test database (e.g. taskboard_test)."
    )
  login_throttle.clear()
  async with engine.begin() as conn:
    await conn.run_sync(Base.metadata.drop_all)
    await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
async def client() -> AsyncClient:
  await _reset_db()
  transport = ASGITransport(app=app)
  async with AsyncClient(transport=transport, base_url="http://localhost") as c:
    yield c


@pytest.fixture
async def db():
  await _reset_db()
  async with SessionLocal() as session:
    yield session


def bearer(token: str) -> dict[str, str]:
  return {"Authorization": f"Bearer {token}"}


async def signup(client: AsyncClient, username: str, email: str | None = None, password: str = "secret1") -> dict:
  res = await client.post(
    "/api/auth/signup",
    json={"username": username, "email": email or f"{username}@x.com", "password": password},
  )
  assert res.status_code == 201, res.text
  return res.json()


async def login(client: AsyncClient, username_or_email: str, password: str = "secret1") -> dict[str, str]:
  res = await client.post("/api/auth/login", json={"usernameOrEmail": username_or_email, "password": password})
  assert res.status_code == 200, res.text
  return bearer(res.json()["accessToken"])


async def auth_headers(client: AsyncClient, username: str) -> dict[str, str]:
  body = await signup(client, username)
  return bearer(body["accessToken"])


async def create_board(client: AsyncClient, headers: dict[str, str], title: str = "Sprint 1", description: str | None = None) -> dict:
  res = await client.post("/api/boards", json={"title": title, "description": description}, headers=headers)
  assert res.status_code == 201, res.text
  return res.json()


async def create_task(
  client: AsyncClient,
  headers: dict[str, str],
  board_id: int,
  title: str,
  *,
  status: str = "TO_DO",
  position: int | None = 0,
  description: str | None = None,
) -> dict:
  payload: dict = {"title": title, "status": status, "description": description}
  if position is not None:
    payload["position"] = position
  res = await client.post(f"/api/boards/{board_id}/tasks", json=payload, headers=headers)
  assert res.status_code == 201, res.text
  return res.json()
