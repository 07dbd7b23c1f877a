from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_JWT_SECRET = "dev-jwt-secret-change-me-0123456789abcdef"


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file=".env", extra="ignore")

  database_url: str = "postgresql+asyncpg://taskboard:taskboard@db:5432/taskboard"
  app_version: str = "v2026-10-19"
  build_sha: str = "dev"
  log_level: str = "INFO"

  jwt_secret: str = PLACEHOLDER_JWT_SECRET
  jwt_algorithm: str = "HS256"
  jwt_expiration_seconds: int = 86400

  # When true, GET /api/boards/{id} is limited to the board owner.
  strict_board_reads: bool = False

  rate_limit_login_per_minute: int = 20
  redis_url: str | None = None

  cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
  api_docs_enabled: bool = True

  def cors_origin_list(self) -> list[str]:
    return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

  def is_test_database(self) -> bool:
    url = self.database_url
    if url.startswith("sqlite"):
      return True
    return "test" in url.rsplit("/", 1)[-1]


settings = Settings()
