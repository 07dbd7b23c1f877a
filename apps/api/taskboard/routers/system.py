from __future__ import annotations

from fastapi import APIRouter

from taskboard.config import settings
from taskboard.metrics import request_stats

router = APIRouter(tags=["system"])


@router.get("/health")
async def health() -> dict:
  return {"ok": True}


@router.get("/version")
async def version() -> dict:
  return {"version": settings.app_version, "buildSha": settings.build_sha}


@router.get("/system/status")
async def system_status() -> dict:
  return {"version": settings.app_version, **request_stats.snapshot()}
