"""
Application configuration loaded from environment variables.

The settings object is built once at startup and handed to ``create_app``;
request handlers reach it through ``app.state``, never through a global.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Taskboard server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TB_", env_file=".env", extra="ignore", frozen=True
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./taskboard.db"
    create_tables_on_startup: bool = True

    # Security
    secret_key: str = ""
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False

    # Logging
    log_level: str = "info"
    log_format: Literal["json", "text"] = "json"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
