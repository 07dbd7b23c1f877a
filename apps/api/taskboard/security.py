from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from taskboard.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE = "Bearer"


class InvalidTokenSubject(ValueError):
  pass


def hash_password(password: str) -> str:
  return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
  return pwd_context.verify(password, password_hash)


def create_access_token(
  user_id: int,
  *,
  secret: str | None = None,
  expires_in: timedelta | None = None,
  now: datetime | None = None,
) -> str:
  """Sign a token whose subject is the user id, valid for the configured window."""
  issued = now or datetime.now(timezone.utc)
  ttl = expires_in if expires_in is not None else timedelta(seconds=settings.jwt_expiration_seconds)
  claims = {"sub": str(user_id), "iat": issued, "exp": issued + ttl}
  token = jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)
  logger.debug("issued access token for user %s", user_id)
  return token


def _decode(token: str, secret: str | None) -> dict:
  return jwt.decode(
    token,
    secret or settings.jwt_secret,
    algorithms=[settings.jwt_algorithm],
    options={"require": ["sub", "exp"]},
  )


def validate_access_token(token: str, *, secret: str | None = None) -> bool:
  # never raises: any failure is reported as an invalid token
  try:
    _decode(token, secret)
    return True
  except jwt.ExpiredSignatureError:
    logger.warning("expired access token")
  except jwt.InvalidSignatureError:
    logger.warning("access token signature mismatch")
  except jwt.DecodeError:
    logger.warning("malformed access token")
  except jwt.PyJWTError as exc:
    logger.warning("rejected access token: %s", exc)
  return False


def user_id_from_token(token: str, *, secret: str | None = None) -> int:
  """Read the subject of an already validated token."""
  subject = _decode(token, secret).get("sub")
  try:
    user_id = int(subject)
  except (TypeError, ValueError) as exc:
    raise InvalidTokenSubject(f"token subject is not a user id: {subject!r}") from exc
  logger.debug("token subject resolved to user %s", user_id)
  return user_id
