from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.boards.service import create_board, delete_board, get_board, list_boards, task_count, update_board
from taskboard.config import settings
from taskboard.deps import get_caller_id, get_db
from taskboard.models import Board
from taskboard.schemas import BoardIn, BoardOut

router = APIRouter(prefix="/api/boards", tags=["boards"])


def _board_out(b: Board, count: int) -> BoardOut:
  return BoardOut(
    id=b.id,
    title=b.title,
    description=b.description,
    userId=b.user_id,
    taskCount=count,
    createdAt=b.created_at,
    updatedAt=b.updated_at,
  )


@router.post("", response_model=BoardOut, status_code=status.HTTP_201_CREATED)
async def create(payload: BoardIn, caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> BoardOut:
  b = await create_board(db, title=payload.title, description=payload.description, owner_id=caller_id)
  return _board_out(b, 0)


@router.get("", response_model=list[BoardOut])
async def list_mine(caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> list[BoardOut]:
  return [_board_out(b, n) for b, n in await list_boards(db, owner_id=caller_id)]


@router.get("/{board_id}", response_model=BoardOut)
async def get_one(board_id: int, caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> BoardOut:
  b = await get_board(db, board_id, caller_id=caller_id if settings.strict_board_reads else None)
  return _board_out(b, await task_count(db, b.id))


@router.put("/{board_id}", response_model=BoardOut)
async def update(
  board_id: int,
  payload: BoardIn,
  caller_id: int = Depends(get_caller_id),
  db: AsyncSession = Depends(get_db),
) -> BoardOut:
  b = await update_board(db, board_id, title=payload.title, description=payload.description, caller_id=caller_id)
  return _board_out(b, await task_count(db, b.id))


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(board_id: int, caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> Response:
  await delete_board(db, board_id, caller_id=caller_id)
  return Response(status_code=status.HTTP_204_NO_CONTENT)
