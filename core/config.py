"""Dataclass-based application configuration.

Settings are grouped into frozen dataclass sections so they can be passed
around as plain values:
- DatabaseConfig: connection URL and pool sizing
- AuthConfig: token signing and password hashing
- PaginationConfig: task list defaults and bounds

Values come from environment variables (and a local .env file, which never
overrides the real environment).
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Nested config sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DatabaseConfig:
    """Relational store connection settings."""

    url: str = "sqlite+aiosqlite:///./taskmanager.db"
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


@dataclass(frozen=True)
class AuthConfig:
    """Token and credential settings."""

    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7
    cookie_name: str = "token"
    cookie_secure: bool = False
    bcrypt_rounds: int = 12


@dataclass(frozen=True)
class PaginationConfig:
    """Task list paging bounds."""

    default_page: int = 1
    default_limit: int = 10
    max_limit: int = 100


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Settings:
    """Complete configuration for the API.

    Usage::

        settings = get_settings()
        engine = create_async_engine(settings.database.url)
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)
    otel_endpoint: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Example: DATABASE_URL=postgresql+asyncpg://localhost/tasks
        """
        load_dotenv(override=False)

        environment = os.getenv("ENVIRONMENT", "development")
        database = DatabaseConfig(
            url=os.getenv("DATABASE_URL", DatabaseConfig.url),
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            echo=_env_bool("DB_ECHO"),
        )
        auth = AuthConfig(
            jwt_secret=os.getenv("JWT_SECRET", AuthConfig.jwt_secret),
            token_ttl_days=int(os.getenv("JWT_EXPIRE_DAYS", "7")),
            cookie_secure=environment == "production",
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
        )
        pagination = PaginationConfig(
            max_limit=int(os.getenv("TASKS_MAX_LIMIT", "100")),
        )
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")

        return cls(
            database=database,
            auth=auth,
            pagination=pagination,
            environment=environment,
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            otel_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings.from_env()
