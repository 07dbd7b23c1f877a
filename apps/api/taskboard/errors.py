from __future__ import annotations

from fastapi import status


class TaskboardError(RuntimeError):
  """Business-rule failure raised by the managers and rendered as `{status, message}`."""

  status_code: int = status.HTTP_400_BAD_REQUEST

  def __init__(self, message: str) -> None:
    super().__init__(message)
    self.message = message


class NotFoundError(TaskboardError):
  status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(TaskboardError):
  status_code = status.HTTP_403_FORBIDDEN


class ConflictError(TaskboardError):
  status_code = status.HTTP_409_CONFLICT


class InvalidCredentialsError(TaskboardError):
  status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(TaskboardError):
  status_code = status.HTTP_401_UNAUTHORIZED


def error_body(status_code: int, message: str) -> dict:
  return {"status": status_code, "message": message}
