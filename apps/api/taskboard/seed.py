from __future__ import annotations

import asyncio
import logging
import os
import secrets

from sqlalchemy import select

from taskboard.db import SessionLocal
from taskboard.models import Board, Task, TaskStatus
from taskboard.users.service import find_user, signup

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@taskboard.local"
DEMO_BOARD = "Sprint 1"


def _bootstrap_password(env_key: str) -> tuple[str, bool]:
  configured = (os.getenv(env_key) or "").strip()
  if configured:
    return configured, False
  return secrets.token_urlsafe(14), True


async def seed() -> list[str]:
  """Create the demo user and board unless they exist. Returns bootstrap credential lines."""
  boot_lines: list[str] = []
  async with SessionLocal() as db:
    u = await find_user(db, DEMO_USERNAME)
    if u is None:
      password, generated = _bootstrap_password("SEED_DEMO_PASSWORD")
      u = await signup(db, username=DEMO_USERNAME, email=DEMO_EMAIL, password=password)
      boot_lines.append(f"{DEMO_USERNAME}={password} (generated={str(generated).lower()})")

    bres = await db.execute(select(Board).where(Board.title == DEMO_BOARD, Board.user_id == u.id))
    board = bres.scalars().first()
    if board is None:
      board = Board(title=DEMO_BOARD, description="Demo board", user_id=u.id)
      db.add(board)
      await db.flush()
      samples = [
        ("Write release notes", TaskStatus.TODO, 0),
        ("Fix login redirect", TaskStatus.IN_PROGRESS, 0),
        ("Set up CI", TaskStatus.DONE, 0),
      ]
      for title, status, position in samples:
        db.add(Task(board=board, title=title, description="", status=status, position=position))
      await db.commit()
      logger.info("seeded board %s for user %s", board.id, u.id)
  return boot_lines


def main() -> None:
  logging.basicConfig(level=logging.INFO)
  for line in asyncio.run(seed()):
    print(line)


if __name__ == "__main__":
  main()
