"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - multisite=True disables member deletion (501) and reserves user
      management to site_admins

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://community:community@db:5432/community"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    # create tables on startup (local SQLite runs); production uses alembic
    database_create_schema: bool = False

    # REST surface
    api_namespace: str = "community/v1"
    site_url: str = "http://localhost:8000"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]

    @field_validator("api_namespace", mode="before")
    @classmethod
    def strip_namespace_slashes(cls, v: str) -> str:
        return v.strip("/") if isinstance(v, str) else v

    # Deployment mode
    multisite: bool = False
    site_admins: list[str] = []

    # Members
    avatar_base_url: str = "https://secure.gravatar.com/avatar"
    avatar_default: str = "mm"
    password_hash_iterations: int = 200_000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def api_prefix(self) -> str:
        return f"/{self.api_namespace}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
