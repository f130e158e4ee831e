"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - session_secret is the only key material the API holds; it verifies, never mints
    - session_secret has no default: a process without SESSION_SECRET refuses to start
    - session_secret is at least 32 bytes (HS256 key length)
    - login_path and cookie name are fixed per process: the route guard reads them once
    - get_settings() is cached, so one Settings instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: typed fields, .env support, early failure
    - Non-secret defaults match docker-compose service names
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SECRET_BYTES = 32


def async_database_url(url: str) -> str:
    """Hosting providers hand out postgresql://; asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url.removeprefix("postgresql://")
    return url


class Settings(BaseSettings):
    """HirePath API settings, read from the environment (or .env)."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # ── persistence ──
    database_url: str = "postgresql+asyncpg://hirepath:hirepath@db:5432/hirepath"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # ── session verification ──
    session_secret: str
    session_algorithm: str = "HS256"
    session_cookie_name: str = "token"
    login_path: str = "/login"

    # ── résumé storage collaborator ──
    upload_service_url: str = "http://uploads:8080"
    upload_timeout_seconds: float = 10.0

    # ── http surface ──
    cors_origins: list[str] = ["http://localhost:3000"]

    # ── logging ──
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        return async_database_url(v) if isinstance(v, str) else v

    @field_validator("session_secret")
    @classmethod
    def secret_long_enough(cls, v: str) -> str:
        if len(v.encode()) < MIN_SECRET_BYTES:
            raise ValueError(f"session_secret must be at least {MIN_SECRET_BYTES} bytes")
        return v

    @field_validator("login_path")
    @classmethod
    def login_path_is_local(cls, v: str) -> str:
        if not v.startswith("/") or v.startswith("//"):
            raise ValueError("login_path must be a local absolute path")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
