from typing import Literal

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEFAULT_SQLITE_PATH = "./database.sqlite"


class Settings(BaseSettings):
    """Application settings."""

    # Application
    ENV: str = "development"
    APP_NAME: str = "Household Expense Tracker"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Database
    DATABASE_TYPE: Literal["sqlite", "postgresql"] = "sqlite"
    SQLITE_DB_PATH: str = DEFAULT_SQLITE_PATH
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "expense_tracker"
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_SSL: bool = False
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_CONNECT_TIMEOUT: float = 2.0

    # Startup
    SEED_DEFAULT_CATEGORIES: bool = True

    # Pydantic v2 compatible settings: read .env and ignore extra env vars
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("DATABASE_TYPE", mode="before")
    @classmethod
    def normalize_database_type(cls, value: object) -> object:
        """Accept POSTGRESQL/Sqlite style values from the environment."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_development(self) -> bool:
        return self.ENV.lower() == "development"

    @computed_field
    @property
    def database_url(self) -> str:
        """SQLAlchemy async URL for the configured backend."""
        if self.DATABASE_TYPE == "postgresql":
            url = URL.create(
                "postgresql+asyncpg",
                username=self.POSTGRES_USER or None,
                password=self.POSTGRES_PASSWORD or None,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                database=self.POSTGRES_DB,
            )
            return url.render_as_string(hide_password=False)

        if self.SQLITE_DB_PATH in ("", ":memory:"):
            return "sqlite+aiosqlite://"
        return f"sqlite+aiosqlite:///{self.SQLITE_DB_PATH}"


def _validate_production(current: Settings) -> None:
    """Fail fast when running production with unusable database settings."""
    if current.ENV.lower() != "production":
        return

    if current.DATABASE_TYPE == "sqlite" and current.SQLITE_DB_PATH in ("", ":memory:"):
        raise ValueError("An in-memory SQLite database cannot be used in production.")

    if current.DATABASE_TYPE == "postgresql" and not current.POSTGRES_USER:
        raise ValueError("POSTGRES_USER must be configured in production.")


settings = Settings()


_validate_production(settings)
