from __future__ import annotations

import pytest
from sqlalchemy import func, select

from conftest import auth_headers, bearer, create_board, create_task, login, signup
from taskboard.db import SessionLocal
from taskboard.models import Board, Task, User

pytestmark = pytest.mark.anyio


async def test_signup_returns_token_and_profile(client):
  body = await signup(client, "alice", "alice@x.com")
  assert body["tokenType"] == "Bearer"
  assert body["accessToken"]
  assert body["username"] == "alice"
  assert body["email"] == "alice@x.com"
  assert isinstance(body["userId"], int)

  me = await client.get("/api/auth/me", headers=bearer(body["accessToken"]))
  assert me.status_code == 200, me.text
  assert me.json() == {"id": body["userId"], "username": "alice", "email": "alice@x.com"}


async def test_signup_rejects_taken_username_and_email(client):
  await signup(client, "alice", "alice@x.com")

  res = await client.post("/api/auth/signup", json={"username": "alice", "email": "other@x.com", "password": "secret1"})
  assert res.status_code == 409, res.text
  assert res.json() == {"status": 409, "message": "Username is already taken: alice"}

  res = await client.post("/api/auth/signup", json={"username": "alice2", "email": "alice@x.com", "password": "secret1"})
  assert res.status_code == 409, res.text
  assert "alice@x.com" in res.json()["message"]

  async with SessionLocal() as db:
    assert (await db.execute(select(func.count(User.id)))).scalar_one() == 1


async def test_uniqueness_is_case_sensitive(client):
  await signup(client, "alice", "alice@x.com")
  body = await signup(client, "Alice", "Alice@x.com")
  assert body["username"] == "Alice"


@pytest.mark.parametrize(
  "payload",
  [
    {"username": "al", "email": "al@x.com", "password": "secret1"},
    {"username": "alice", "email": "not-an-email", "password": "secret1"},
    {"username": "alice", "email": "alice@x.com", "password": "short"},
    {"username": "alice", "email": "alice@x.com"},
  ],
)
async def test_signup_validation_errors_are_400(client, payload):
  res = await client.post("/api/auth/signup", json=payload)
  assert res.status_code == 400, res.text
  body = res.json()
  assert body["status"] == 400
  assert body["message"]


async def test_login_with_username_or_email(client):
  await signup(client, "alice", "alice@x.com", password="pw12345")
  by_name = await login(client, "alice", "pw12345")
  by_email = await login(client, "alice@x.com", "pw12345")
  for headers in (by_name, by_email):
    me = await client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200, me.text
    assert me.json()["username"] == "alice"


async def test_login_failures_share_one_message(client):
  await signup(client, "alice", "alice@x.com", password="pw12345")
  wrong_pw = await client.post("/api/auth/login", json={"usernameOrEmail": "alice", "password": "nope123"})
  unknown = await client.post("/api/auth/login", json={"usernameOrEmail": "nobody", "password": "pw12345"})
  assert wrong_pw.status_code == 400, wrong_pw.text
  assert unknown.status_code == 400, unknown.text
  assert wrong_pw.json() == unknown.json() == {"status": 400, "message": "Invalid username/email or password"}


async def test_me_requires_bearer_token(client):
  body = await signup(client, "alice")
  token = body["accessToken"]

  res = await client.get("/api/auth/me")
  assert res.status_code == 401, res.text
  assert res.json()["status"] == 401
  assert res.headers.get("www-authenticate") == "Bearer"

  res = await client.get("/api/auth/me", headers={"Authorization": f"bearer {token}"})
  assert res.status_code == 401, res.text

  res = await client.get("/api/auth/me", headers={"Authorization": token})
  assert res.status_code == 401, res.text

  res = await client.get("/api/auth/me", headers=bearer(token + "x"))
  assert res.status_code == 401, res.text


async def test_logout_is_public_and_stateless(client):
  body = await signup(client, "alice")
  res = await client.post("/api/auth/logout")
  assert res.status_code == 200, res.text
  assert res.json()["message"]

  # the token keeps working until it expires
  me = await client.get("/api/auth/me", headers=bearer(body["accessToken"]))
  assert me.status_code == 200, me.text


async def test_delete_account_removes_owned_boards_and_tasks(client):
  alice = await auth_headers(client, "alice")
  bob = await auth_headers(client, "bob")
  a_board = await create_board(client, alice, "Alice board")
  b_board = await create_board(client, bob, "Bob board")
  await create_task(client, alice, a_board["id"], "A1")
  await create_task(client, alice, a_board["id"], "A2", position=1)
  b_task = await create_task(client, bob, b_board["id"], "B1")

  res = await client.delete("/api/auth/me", headers=alice)
  assert res.status_code == 204, res.text

  async with SessionLocal() as db:
    boards = (await db.execute(select(Board.id))).scalars().all()
    tasks = (await db.execute(select(Task.id))).scalars().all()
    users = (await db.execute(select(User.username))).scalars().all()
  assert boards == [b_board["id"]]
  assert tasks == [b_task["id"]]
  assert users == ["bob"]

  # token outlives the account but no longer resolves to a user
  res = await client.get("/api/auth/me", headers=alice)
  assert res.status_code == 404, res.text


async def test_passwords_longer_than_bcrypt_reads_are_rejected(client):
  res = await client.post("/api/auth/signup", json={"username": "alice", "email": "alice@x.com", "password": "p" * 73})
  assert res.status_code == 400, res.text

  # multi-byte characters count by their encoded size
  res = await client.post("/api/auth/signup", json={"username": "alice", "email": "alice@x.com", "password": "é" * 37})
  assert res.status_code == 400, res.text

  body = await signup(client, "alice", "alice@x.com", password="p" * 72)
  assert body["username"] == "alice"
  await login(client, "alice", "p" * 72)

  res = await client.post("/api/auth/login", json={"usernameOrEmail": "alice", "password": "p" * 72 + "extra"})
  assert res.status_code == 400, res.text
