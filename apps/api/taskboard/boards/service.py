from __future__ import annotations

import logging

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.errors import ForbiddenError, NotFoundError
from taskboard.models import Board, Task, User, utcnow

logger = logging.getLogger(__name__)


async def delete_board_rows(db: AsyncSession, board_ids: Select) -> None:
  # tasks first, then their boards; nothing relies on database-level cascades
  await db.execute(delete(Task).where(Task.board_id.in_(board_ids)))
  await db.execute(delete(Board).where(Board.id.in_(board_ids)))


async def load_board(db: AsyncSession, board_id: int) -> Board:
  res = await db.execute(select(Board).where(Board.id == board_id))
  b = res.scalar_one_or_none()
  if b is None:
    raise NotFoundError(f"Board not found: {board_id}")
  return b


def ensure_owner(b: Board, caller_id: int) -> None:
  if b.user_id != caller_id:
    logger.warning("user %s denied access to board %s owned by %s", caller_id, b.id, b.user_id)
    raise ForbiddenError(f"Not allowed to access board {b.id}")


async def load_owned_board(db: AsyncSession, board_id: int, caller_id: int) -> Board:
  b = await load_board(db, board_id)
  ensure_owner(b, caller_id)
  return b


async def task_count(db: AsyncSession, board_id: int) -> int:
  res = await db.execute(select(func.count(Task.id)).where(Task.board_id == board_id))
  return int(res.scalar_one())


async def create_board(db: AsyncSession, *, title: str, description: str | None, owner_id: int) -> Board:
  res = await db.execute(select(User.id).where(User.id == owner_id))
  if res.scalar_one_or_none() is None:
    raise NotFoundError(f"User not found: {owner_id}")
  b = Board(title=title, description=description, user_id=owner_id)
  db.add(b)
  await db.commit()
  logger.info("user %s created board %s", owner_id, b.id)
  return b


async def list_boards(db: AsyncSession, *, owner_id: int) -> list[tuple[Board, int]]:
  """Boards of one owner, newest first, each paired with its task count."""
  res = await db.execute(
    select(Board, func.count(Task.id))
    .outerjoin(Task, Task.board_id == Board.id)
    .where(Board.user_id == owner_id)
    .group_by(Board.id)
    .order_by(Board.created_at.desc(), Board.id.desc())
  )
  return [(b, int(n)) for b, n in res.all()]


async def get_board(db: AsyncSession, board_id: int, *, caller_id: int | None = None) -> Board:
  # ownership is only enforced when a caller is passed in
  b = await load_board(db, board_id)
  if caller_id is not None:
    ensure_owner(b, caller_id)
  return b


async def update_board(db: AsyncSession, board_id: int, *, title: str, description: str | None, caller_id: int) -> Board:
  b = await load_owned_board(db, board_id, caller_id)
  b.title = title
  b.description = description
  b.updated_at = utcnow()
  await db.commit()
  logger.info("user %s updated board %s", caller_id, b.id)
  return b


async def delete_board(db: AsyncSession, board_id: int, *, caller_id: int) -> None:
  b = await load_owned_board(db, board_id, caller_id)
  await delete_board_rows(db, select(Board.id).where(Board.id == b.id))
  await db.commit()
  logger.info("user %s deleted board %s", caller_id, board_id)
