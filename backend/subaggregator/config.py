"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in code paths)
    - get_settings() is cached (lru_cache) — single instance per process
    - database_url always uses the asyncpg driver for PostgreSQL

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - DATABASE_URL wins; otherwise the URL is assembled from DB_* parts so the
      docker-compose style (DB_HOST, DB_PORT, ...) keeps working
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def _to_asyncpg_url(url: str) -> str:
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str | None = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "sub_aggregator"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_sslmode: str = "disable"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            return _to_asyncpg_url(v) if v else None
        return v

    @model_validator(mode="after")
    def assemble_database_url(self):
        if not self.database_url:
            url = (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
            if self.db_sslmode != "disable":
                url += f"?ssl={self.db_sslmode}"
            self.database_url = url
        return self

    database_pool_size: int = 10
    database_max_overflow: int = 10
    run_migrations_on_startup: bool = False
    # alembic.ini location; defaults to the one beside the source tree
    alembic_config: str | None = None

    # Storage calls
    storage_timeout_seconds: float = 10.0

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    server_host: str = "0.0.0.0"
    server_port: int = 8080

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
