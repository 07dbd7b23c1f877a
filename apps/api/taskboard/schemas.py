from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field
from pydantic import field_validator

from taskboard.models import POSITION_MAX, POSITION_MIN, TaskStatus

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

BOARD_TITLE_MAX = 100
BOARD_DESCRIPTION_MAX = 500
TASK_TITLE_MAX = 200
TASK_DESCRIPTION_MAX = 1000
# bcrypt only reads the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def _not_blank(value: str, field: str) -> str:
  if not value or not value.strip():
    raise ValueError(f"{field} must not be blank")
  return value


def _parse_status(value: object) -> object:
  # "TODO" is accepted as shorthand for the TO_DO column
  if isinstance(value, str) and value.strip().upper() == "TODO":
    return TaskStatus.TODO.value
  return value


def _password_fits(value: str) -> str:
  if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
    raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
  return value


StatusValue = Annotated[TaskStatus, BeforeValidator(_parse_status)]
Position = Annotated[int, Field(ge=POSITION_MIN, le=POSITION_MAX)]


class SignupIn(BaseModel):
  username: str = Field(min_length=3, max_length=50)
  email: str = Field(min_length=3, max_length=100)
  password: str = Field(min_length=6, max_length=PASSWORD_MAX_BYTES)

  @field_validator("username")
  @classmethod
  def _username_not_blank(cls, v: str) -> str:
    return _not_blank(v, "username")

  @field_validator("password")
  @classmethod
  def _password_bytes(cls, v: str) -> str:
    return _password_fits(v)

  @field_validator("email")
  @classmethod
  def _email_shape(cls, v: str) -> str:
    if not _EMAIL_RE.fullmatch(v):
      raise ValueError("email must be a valid address")
    return v


class LoginIn(BaseModel):
  usernameOrEmail: str = Field(min_length=1, max_length=100)
  password: str = Field(min_length=1, max_length=PASSWORD_MAX_BYTES)

  @field_validator("usernameOrEmail")
  @classmethod
  def _login_not_blank(cls, v: str) -> str:
    return _not_blank(v, "usernameOrEmail")

  @field_validator("password")
  @classmethod
  def _password_bytes(cls, v: str) -> str:
    return _password_fits(v)


class AuthOut(BaseModel):
  accessToken: str
  tokenType: str = "Bearer"
  userId: int
  username: str
  email: str


class UserOut(BaseModel):
  id: int
  username: str
  email: str


class MessageOut(BaseModel):
  message: str


class BoardIn(BaseModel):
  title: str = Field(min_length=1, max_length=BOARD_TITLE_MAX)
  description: str | None = Field(default=None, max_length=BOARD_DESCRIPTION_MAX)

  @field_validator("title")
  @classmethod
  def _title_not_blank(cls, v: str) -> str:
    return _not_blank(v, "title")


class BoardOut(BaseModel):
  id: int
  title: str
  description: str | None = None
  userId: int
  taskCount: int = 0
  createdAt: datetime
  updatedAt: datetime


class TaskCreateIn(BaseModel):
  title: str = Field(min_length=1, max_length=TASK_TITLE_MAX)
  description: str | None = Field(default=None, max_length=TASK_DESCRIPTION_MAX)
  status: StatusValue
  position: Position | None = None

  @field_validator("title")
  @classmethod
  def _title_not_blank(cls, v: str) -> str:
    return _not_blank(v, "title")


class TaskUpdateIn(BaseModel):
  title: str = Field(min_length=1, max_length=TASK_TITLE_MAX)
  description: str | None = Field(default=None, max_length=TASK_DESCRIPTION_MAX)

  @field_validator("title")
  @classmethod
  def _title_not_blank(cls, v: str) -> str:
    return _not_blank(v, "title")


class TaskStatusIn(BaseModel):
  status: StatusValue
  position: Position


class TaskPositionIn(BaseModel):
  position: Position


class TaskOut(BaseModel):
  id: int
  title: str
  description: str | None = None
  status: TaskStatus
  position: int
  boardId: int
  boardTitle: str
  createdAt: datetime
  updatedAt: datetime
