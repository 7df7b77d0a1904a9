"""Application settings using Pydantic BaseSettings."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./widget_console.db"


def get_async_database_url() -> str:
    """Get database URL converted for an async driver."""
    url = os.environ.get("DATABASE_URL", "") or settings.database_url
    # Convert postgres:// to postgresql+asyncpg:// for SQLAlchemy async
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg doesn't support sslmode, it uses ssl parameter
    if "sslmode=" in url:
        url = re.sub(r'[?&]sslmode=[^&]*', '', url)
        url = url.rstrip('?&')
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    # Configuration profiles
    reserved_profile_id: str = "default"
    seed_defaults_on_startup: bool = True
    # 0 keeps the cached active profile until a mutation replaces it
    active_profile_cache_ttl_seconds: int = 0

    # Field encryption (Fernet key, urlsafe base64). Empty disables encryption.
    field_encryption_key: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
