from __future__ import annotations

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.boards.service import delete_board_rows
from taskboard.errors import ConflictError, InvalidCredentialsError, NotFoundError
from taskboard.models import Board, User
from taskboard.security import hash_password, verify_password

logger = logging.getLogger(__name__)


async def signup(db: AsyncSession, *, username: str, email: str, password: str) -> User:
  # exact comparison: uniqueness is as case-sensitive as the column collation
  res = await db.execute(select(User.id).where(User.username == username))
  if res.scalar_one_or_none() is not None:
    raise ConflictError(f"Username is already taken: {username}")
  res = await db.execute(select(User.id).where(User.email == email))
  if res.scalar_one_or_none() is not None:
    raise ConflictError(f"Email is already registered: {email}")

  u = User(username=username, email=email, password_hash=hash_password(password))
  db.add(u)
  try:
    await db.commit()
  except IntegrityError as exc:
    # lost a race against a concurrent signup with the same username or email
    await db.rollback()
    raise ConflictError("Username or email is already registered") from exc
  logger.info("signed up user %s (%s)", u.id, u.username)
  return u


async def authenticate(db: AsyncSession, *, username_or_email: str, password: str) -> User:
  res = await db.execute(select(User).where(User.username == username_or_email))
  u = res.scalar_one_or_none()
  if u is None:
    res = await db.execute(select(User).where(User.email == username_or_email))
    u = res.scalar_one_or_none()
  if u is None or not verify_password(password, u.password_hash):
    logger.warning("failed login for %s", username_or_email)
    raise InvalidCredentialsError("Invalid username/email or password")
  logger.info("user %s logged in", u.id)
  return u


async def get_user(db: AsyncSession, user_id: int) -> User:
  res = await db.execute(select(User).where(User.id == user_id))
  u = res.scalar_one_or_none()
  if u is None:
    raise NotFoundError(f"User not found: {user_id}")
  return u


async def find_user(db: AsyncSession, username_or_email: str) -> User | None:
  res = await db.execute(select(User).where(or_(User.username == username_or_email, User.email == username_or_email)))
  return res.scalars().first()


async def delete_account(db: AsyncSession, user_id: int) -> None:
  """Remove a user with every board and task they own, children first."""
  u = await get_user(db, user_id)
  await delete_board_rows(db, select(Board.id).where(Board.user_id == u.id))
  await db.execute(delete(User).where(User.id == u.id))
  await db.commit()
  logger.info("deleted account %s", user_id)
