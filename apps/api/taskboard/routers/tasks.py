from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.deps import get_caller_id, get_db
from taskboard.models import Task
from taskboard.schemas import StatusValue, TaskCreateIn, TaskOut, TaskPositionIn, TaskStatusIn, TaskUpdateIn
from taskboard.tasks.service import (
  create_task,
  delete_task,
  get_task,
  list_tasks,
  update_task_info,
  update_task_position,
  update_task_status,
)

router = APIRouter(prefix="/api", tags=["tasks"])


def _task_out(t: Task) -> TaskOut:
  return TaskOut(
    id=t.id,
    title=t.title,
    description=t.description,
    status=t.status,
    position=t.position,
    boardId=t.board_id,
    boardTitle=t.board.title,
    createdAt=t.created_at,
    updatedAt=t.updated_at,
  )


@router.post("/boards/{board_id}/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create(
  board_id: int,
  payload: TaskCreateIn,
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> TaskOut:
  t = await create_task(
    db,
    board_id=board_id,
    title=payload.title,
    description=payload.description,
    status=payload.status,
    position=payload.position,
    caller_id=caller_id,
  )
  return _task_out(t)


@router.get("/boards/{board_id}/tasks", response_model=list[TaskOut])
async def list_for_board(
  board_id: int,
  status_filter: StatusValue | None = Query(default=None, alias="status"),
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> list[TaskOut]:
  return [_task_out(t) for t in await list_tasks(db, board_id=board_id, caller_id=caller_id, status=status_filter)]


@router.get("/tasks/{task_id}", response_model=TaskOut)
async def get_one(task_id: int, caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> TaskOut:
  return _task_out(await get_task(db, task_id, caller_id=caller_id))


@router.put("/tasks/{task_id}", response_model=TaskOut)
async def update_info(
  task_id: int,
  payload: TaskUpdateIn,
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> TaskOut:
  t = await update_task_info(db, task_id, title=payload.title, description=payload.description, caller_id=caller_id)
  return _task_out(t)


@router.patch("/tasks/{task_id}/status", response_model=TaskOut)
async def update_status(
  task_id: int,
  payload: TaskStatusIn,
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> TaskOut:
  t = await update_task_status(db, task_id, status=payload.status, position=payload.position, caller_id=caller_id)
  return _task_out(t)


@router.patch("/tasks/{task_id}/position", response_model=TaskOut)
async def update_position(
  task_id: int,
  payload: TaskPositionIn,
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> TaskOut:
  t = await update_task_position(db, task_id, position=payload.position, caller_id=caller_id)
  return _task_out(t)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(task_id: int, caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> Response:
  await delete_task(db, task_id, caller_id=caller_id)
  return Response(status_code=status.HTTP_204_NO_CONTENT)
