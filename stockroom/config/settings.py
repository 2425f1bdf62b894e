"""
Application settings loaded from the environment (and ``.env``).

Each section reads its own prefixed variables, e.g. ``STORAGE_DATA_DIR``
or ``AUTH_SECRET_KEY``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"


class StorageSettings(BaseSettings):
    """SQLite database location and pool."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockroom.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="Write-lock wait in ms")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """HTTP server."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]


class AuthSettings(BaseSettings):
    """Password hashing and access tokens."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    secret_key: str = DEFAULT_SECRET_KEY
    token_expire_minutes: int = Field(default=14 * 24 * 60, ge=1)
    password_iterations: int = Field(default=260_000, ge=1)


class InventorySettings(BaseSettings):
    """Listing page sizes."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=200, ge=1)

    @model_validator(mode="after")
    def default_within_max(self) -> "InventorySettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self


class Settings(BaseSettings):
    """Top-level settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockroom Inventory Service"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        if self.is_production and self.auth.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("AUTH_SECRET_KEY must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
