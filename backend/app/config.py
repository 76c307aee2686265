"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in modules)
    - get_settings() is cached (lru_cache), one instance per process
    - PORT falls back to 5000 when unset

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - create_app() accepts an explicit Settings instance so tests never touch the cache
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://chirp:chirp@db:5432/chirp"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_schema: bool = True

    # Listener
    host: str = "0.0.0.0"
    port: int = 5000

    # Auth
    jwt_secret_key: str = "chirp-dev-secret"
    jwt_algorithm: str = "HS256"
    jwt_expires_seconds: int = 3600
    bcrypt_rounds: int = 10

    # GraphQL
    graphiql: bool = False

    # Body parsing
    max_body_bytes: int = 100 * 1024
    max_form_fields: int = 1000

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
