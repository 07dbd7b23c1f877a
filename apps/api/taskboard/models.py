from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
  return datetime.now(timezone.utc)


class Base(DeclarativeBase):
  pass


# positions live in a 32-bit INTEGER column
POSITION_MIN = -(2**31)
POSITION_MAX = 2**31 - 1


class TaskStatus(str, enum.Enum):
  TODO = "TO_DO"
  IN_PROGRESS = "IN_PROGRESS"
  DONE = "DONE"


class User(Base):
  __tablename__ = "users"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
  email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
  password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Board(Base):
  __tablename__ = "boards"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  title: Mapped[str] = mapped_column(String(100), nullable=False)
  description: Mapped[str | None] = mapped_column(String(500), nullable=True)
  user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Task(Base):
  __tablename__ = "tasks"
  __table_args__ = (Index("ix_tasks_board_status_position", "board_id", "status", "position"),)

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  board_id: Mapped[int] = mapped_column(Integer, ForeignKey("boards.id"), nullable=False)
  title: Mapped[str] = mapped_column(String(200), nullable=False)
  description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
  status: Mapped[TaskStatus] = mapped_column(
    Enum(TaskStatus, name="task_status", native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
    nullable=False,
    default=TaskStatus.TODO,
  )
  position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

  # used for boardTitle; deletes are issued explicitly, never cascaded from here
  board: Mapped[Board] = relationship(lazy="joined")
