"""
Login throttling.

Attempts are counted per client IP in fixed windows. With REDIS_URL set the
counters live in Redis so every replica shares them; otherwise, and whenever
Redis cannot be reached, each process counts on its own.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from threading import Lock

import redis

from taskboard.config import settings

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
REDIS_KEY_PREFIX = "taskboard:login:"


@dataclass(frozen=True)
class Verdict:
  allowed: bool
  retry_after: int = 0


class LoginThrottle:
  def __init__(self, redis_url: str | None = None, *, window_seconds: int = WINDOW_SECONDS) -> None:
    self.window_seconds = window_seconds
    self._lock = Lock()
    # client ip -> (window start, attempts in window)
    self._windows: dict[str, tuple[float, int]] = {}
    self._redis: redis.Redis | None = redis.Redis.from_url(redis_url, decode_responses=True) if redis_url else None

  def attempt(self, client_ip: str, *, limit: int) -> Verdict:
    """Count one login attempt from `client_ip` and say whether it may proceed."""
    if self._redis is not None:
      try:
        return self._attempt_shared(client_ip, limit)
      except redis.RedisError as exc:
        logger.warning("login throttle using local counters, redis unavailable: %s", exc)
    return self._attempt_local(client_ip, limit)

  def _attempt_local(self, client_ip: str, limit: int) -> Verdict:
    now = time.monotonic()
    with self._lock:
      started, count = self._windows.get(client_ip, (now, 0))
      if now - started >= self.window_seconds:
        started, count = now, 0
      count += 1
      self._windows[client_ip] = (started, count)
    if count <= limit:
      return Verdict(allowed=True)
    logger.warning("login throttled for %s after %s attempts", client_ip, count)
    return Verdict(allowed=False, retry_after=max(1, math.ceil(started + self.window_seconds - now)))

  def _attempt_shared(self, client_ip: str, limit: int) -> Verdict:
    key = f"{REDIS_KEY_PREFIX}{client_ip}"
    # the window starts with the first attempt: SET NX gives the key its expiry once
    _, count, ttl = (
      self._redis.pipeline()
      .set(key, 0, ex=self.window_seconds, nx=True)
      .incr(key)
      .ttl(key)
      .execute()
    )
    if int(count) <= limit:
      return Verdict(allowed=True)
    logger.warning("login throttled for %s after %s attempts", client_ip, count)
    return Verdict(allowed=False, retry_after=int(ttl) if int(ttl) > 0 else self.window_seconds)

  def clear(self) -> None:
    with self._lock:
      self._windows.clear()


login_throttle = LoginThrottle(settings.redis_url)
