"""
Bearer-token authorization gate.

Every request passes through `bearer_auth_middleware`. The caller identity is
resolved from `Authorization: Bearer <token>` and stored on `request.state.user_id`
(None when absent or invalid). Requests under /api/ that are not public and carry
no resolved identity are rejected with 401 before any handler runs.
"""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from taskboard.errors import error_body
from taskboard.security import user_id_from_token, validate_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
PROTECTED_PREFIX = "/api/"
PUBLIC_PATHS = frozenset({"/api/auth/signup", "/api/auth/login", "/api/auth/logout"})


def bearer_token(request: Request) -> str | None:
  header = request.headers.get("authorization")
  # prefix match is case-sensitive on purpose: "bearer x" is not a bearer token
  if header and header.startswith(BEARER_PREFIX):
    token = header[len(BEARER_PREFIX):]
    return token or None
  return None


def resolve_caller_id(request: Request) -> int | None:
  try:
    token = bearer_token(request)
    if token and validate_access_token(token):
      user_id = user_id_from_token(token)
      logger.debug("authenticated user %s for %s", user_id, request.url.path)
      return user_id
  except Exception as exc:
    logger.error("could not resolve caller identity for %s: %s", request.url.path, exc)
  return None


def is_public(path: str, method: str) -> bool:
  if method == "OPTIONS":
    return True
  if not path.startswith(PROTECTED_PREFIX):
    return True
  return path.rstrip("/") in PUBLIC_PATHS


async def bearer_auth_middleware(request: Request, call_next):
  request.state.user_id = resolve_caller_id(request)
  if request.state.user_id is None and not is_public(request.url.path, request.method):
    return JSONResponse(
      status_code=status.HTTP_401_UNAUTHORIZED,
      content=error_body(status.HTTP_401_UNAUTHORIZED, "Authentication required"),
      headers={"WWW-Authenticate": "Bearer"},
    )
  return await call_next(request)
