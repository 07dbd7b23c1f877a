"""In-process request counters reported by /system/status."""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from time import monotonic

WINDOW_SECONDS = 3600


@dataclass(frozen=True)
class _Hit:
  at: float
  group: str
  status_code: int
  latency_ms: float


def route_group(path: str) -> str:
  """Collapse a request path to the resource it targets: auth, boards, tasks or other."""
  parts = [p for p in path.split("/") if p]
  if len(parts) >= 2 and parts[0] == "api":
    # /api/boards/{id}/tasks is a task listing
    if parts[1] == "boards" and len(parts) >= 4 and parts[3] == "tasks":
      return "tasks"
    if parts[1] in ("auth", "boards", "tasks"):
      return parts[1]
  return "other"


class RequestStats:
  def __init__(self, window_seconds: int = WINDOW_SECONDS) -> None:
    self.window_seconds = window_seconds
    self._started = monotonic()
    self._started_at = datetime.now(timezone.utc)
    self._hits: deque[_Hit] = deque()
    self._lock = Lock()

  def uptime_seconds(self) -> int:
    return max(0, int(monotonic() - self._started))

  def record(self, path: str, status_code: int, latency_ms: float) -> None:
    now = monotonic()
    with self._lock:
      self._hits.append(_Hit(at=now, group=route_group(path), status_code=status_code, latency_ms=latency_ms))
      self._expire_locked(now)

  def _expire_locked(self, now: float) -> None:
    while self._hits and now - self._hits[0].at > self.window_seconds:
      self._hits.popleft()

  def snapshot(self) -> dict:
    with self._lock:
      self._expire_locked(monotonic())
      hits = list(self._hits)

    classes = Counter(f"{h.status_code // 100}xx" for h in hits)
    p95 = 0.0
    if hits:
      latencies = sorted(h.latency_ms for h in hits)
      p95 = latencies[max(0, int(len(latencies) * 0.95) - 1)]

    return {
      "startedAt": self._started_at.isoformat(),
      "uptimeSeconds": self.uptime_seconds(),
      "windowSeconds": self.window_seconds,
      "requestCount": len(hits),
      "byStatusClass": dict(classes),
      "byRouteGroup": dict(Counter(h.group for h in hits)),
      "unauthorizedCount": sum(1 for h in hits if h.status_code == 401),
      "forbiddenCount": sum(1 for h in hits if h.status_code == 403),
      "p95LatencyMs": round(p95, 2),
    }


request_stats = RequestStats()
