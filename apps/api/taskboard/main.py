from __future__ import annotations

import logging
from time import monotonic

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.auth_gate import bearer_auth_middleware
from taskboard.config import PLACEHOLDER_JWT_SECRET, settings
from taskboard.errors import TaskboardError, error_body
from taskboard.metrics import request_stats
from taskboard.routers.auth import router as auth_router
from taskboard.routers.boards import router as boards_router
from taskboard.routers.system import router as system_router
from taskboard.routers.tasks import router as tasks_router

logging.basicConfig(
  level=getattr(logging, settings.log_level.upper(), logging.INFO),
  format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
  title="Taskboard API",
  version="0.1.0",
  docs_url="/docs" if settings.api_docs_enabled else None,
  redoc_url="/redoc" if settings.api_docs_enabled else None,
  openapi_url="/openapi.json" if settings.api_docs_enabled else None,
)


@app.exception_handler(TaskboardError)
async def _taskboard_error_handler(_, exc: TaskboardError) -> JSONResponse:
  return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message))


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(_, exc: StarletteHTTPException) -> JSONResponse:
  return JSONResponse(
    status_code=exc.status_code,
    content=error_body(exc.status_code, str(exc.detail)),
    headers=getattr(exc, "headers", None),
  )


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(_, exc: RequestValidationError) -> JSONResponse:
  parts = []
  for err in exc.errors():
    loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
    parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
  message = "; ".join(parts) or "Invalid request"
  return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(status.HTTP_400_BAD_REQUEST, message))


# innermost first: the gate runs after CORS has answered preflight requests
app.middleware("http")(bearer_auth_middleware)
app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.cors_origin_list(),
  allow_credentials=True,
  allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
  allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(boards_router)
app.include_router(tasks_router)
app.include_router(system_router)


@app.middleware("http")
async def _request_metrics_middleware(request, call_next):
  start = monotonic()
  response = await call_next(request)
  elapsed_ms = (monotonic() - start) * 1000.0
  request_stats.record(request.url.path, response.status_code, elapsed_ms)
  response.headers.setdefault("X-Content-Type-Options", "nosniff")
  response.headers.setdefault("X-Frame-Options", "DENY")
  response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
  return response


@app.on_event("startup")
async def _startup() -> None:
  if settings.is_test_database():
    return
  if not settings.jwt_secret or settings.jwt_secret.strip() == PLACEHOLDER_JWT_SECRET:
    raise RuntimeError("JWT_SECRET is required and must not be the development placeholder")
  logger.info("taskboard api %s started", settings.app_version)
