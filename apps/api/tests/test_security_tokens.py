from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from taskboard.config import settings
from taskboard.security import (
  InvalidTokenSubject,
  create_access_token,
  hash_password,
  user_id_from_token,
  validate_access_token,
  verify_password,
)

OTHER_SECRET = "another-secret-that-is-long-enough-for-hs256"


def test_fresh_token_validates_and_carries_user_id():
  token = create_access_token(42)
  assert validate_access_token(token) is True
  assert user_id_from_token(token) == 42


def test_token_expiry_comes_from_settings():
  now = datetime.now(timezone.utc).replace(microsecond=0)
  token = create_access_token(7, now=now)
  claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
  assert claims["sub"] == "7"
  assert claims["exp"] - claims["iat"] == settings.jwt_expiration_seconds


def test_expired_token_is_invalid(caplog):
  issued = datetime.now(timezone.utc) - timedelta(days=2)
  token = create_access_token(1, now=issued, expires_in=timedelta(hours=1))
  with caplog.at_level(logging.WARNING, logger="taskboard.security"):
    assert validate_access_token(token) is False
  assert "expired" in caplog.text


def test_token_signed_with_other_key_is_invalid():
  token = create_access_token(1, secret=OTHER_SECRET)
  assert validate_access_token(token) is False
  assert validate_access_token(token, secret=OTHER_SECRET) is True


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer abc"])
def test_malformed_tokens_are_invalid(token):
  assert validate_access_token(token) is False


def test_token_without_expiry_is_invalid():
  token = jwt.encode({"sub": "1"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
  assert validate_access_token(token) is False


def test_non_numeric_subject_raises():
  exp = datetime.now(timezone.utc) + timedelta(minutes=5)
  token = jwt.encode({"sub": "alice", "exp": exp}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
  assert validate_access_token(token) is True
  with pytest.raises(InvalidTokenSubject):
    user_id_from_token(token)


def test_password_hashing_round_trip():
  h = hash_password("secret1")
  assert h != "secret1"
  assert verify_password("secret1", h)
  assert not verify_password("secret2", h)
