"""
Task manager.

Every operation resolves the task's board and checks that the caller owns it.
Positions are advisory: they are stored exactly as given and sibling tasks are
never renumbered, so gaps and duplicates within a status column are possible.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.boards.service import ensure_owner, load_owned_board
from taskboard.errors import NotFoundError
from taskboard.models import POSITION_MAX, Task, TaskStatus, utcnow

logger = logging.getLogger(__name__)


async def _load_owned_task(db: AsyncSession, task_id: int, caller_id: int) -> Task:
  res = await db.execute(select(Task).where(Task.id == task_id))
  t = res.scalar_one_or_none()
  if t is None:
    raise NotFoundError(f"Task not found: {task_id}")
  ensure_owner(t.board, caller_id)
  return t


async def next_position(db: AsyncSession, *, board_id: int, status: TaskStatus) -> int:
  res = await db.execute(select(func.max(Task.position)).where(Task.board_id == board_id, Task.status == status))
  max_pos = res.scalar_one()
  if max_pos is None:
    return 0
  return min(max_pos + 1, POSITION_MAX)


async def create_task(
  db: AsyncSession,
  *,
  board_id: int,
  title: str,
  description: str | None,
  status: TaskStatus,
  position: int | None,
  caller_id: int,
) -> Task:
  b = await load_owned_board(db, board_id, caller_id)
  if position is None:
    position = await next_position(db, board_id=b.id, status=status)
  t = Task(board=b, title=title, description=description, status=status, position=position)
  db.add(t)
  await db.commit()
  logger.info("user %s created task %s on board %s (%s@%s)", caller_id, t.id, b.id, status.value, position)
  return t


async def list_tasks(
  db: AsyncSession,
  *,
  board_id: int,
  caller_id: int,
  status: TaskStatus | None = None,
) -> list[Task]:
  b = await load_owned_board(db, board_id, caller_id)
  q = select(Task).where(Task.board_id == b.id)
  if status is not None:
    q = q.where(Task.status == status)
  res = await db.execute(q.order_by(Task.position.asc(), Task.id.asc()))
  return list(res.scalars().all())


async def get_task(db: AsyncSession, task_id: int, *, caller_id: int) -> Task:
  return await _load_owned_task(db, task_id, caller_id)


async def update_task_info(db: AsyncSession, task_id: int, *, title: str, description: str | None, caller_id: int) -> Task:
  t = await _load_owned_task(db, task_id, caller_id)
  t.title = title
  t.description = description
  t.updated_at = utcnow()
  await db.commit()
  logger.info("user %s updated task %s", caller_id, t.id)
  return t


async def update_task_status(db: AsyncSession, task_id: int, *, status: TaskStatus, position: int, caller_id: int) -> Task:
  # any status may follow any other; status and position change together
  t = await _load_owned_task(db, task_id, caller_id)
  old_status = t.status
  t.status = status
  t.position = position
  t.updated_at = utcnow()
  await db.commit()
  logger.info("user %s moved task %s %s -> %s@%s", caller_id, t.id, old_status.value, status.value, position)
  return t


async def update_task_position(db: AsyncSession, task_id: int, *, position: int, caller_id: int) -> Task:
  t = await _load_owned_task(db, task_id, caller_id)
  t.position = position
  t.updated_at = utcnow()
  await db.commit()
  logger.info("user %s set task %s position to %s", caller_id, t.id, position)
  return t


async def delete_task(db: AsyncSession, task_id: int, *, caller_id: int) -> None:
  t = await _load_owned_task(db, task_id, caller_id)
  await db.execute(delete(Task).where(Task.id == t.id))
  await db.commit()
  logger.info("user %s deleted task %s", caller_id, task_id)
