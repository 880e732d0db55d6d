# pipe_catalog/settings.py
"""
Pipe Catalog Settings - environment / .env driven.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices


class Settings(BaseSettings):
    # =========================================================================
    # Data root (logs)
    # =========================================================================
    CATALOG_DATA_ROOT: Path = Field(
        default=(Path(__file__).resolve().parents[2] / "catalog-data"),
        validation_alias=AliasChoices("CATALOG_DATA_ROOT", "catalog_data_root"),
    )

    # =========================================================================
    # Database
    # =========================================================================
    # Full async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...
    DATABASE_URL: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    DB_HOST: str = Field(default="localhost", validation_alias="DB_HOST")
    DB_PORT: int = Field(default=5432, validation_alias="DB_PORT")
    DB_NAME: str = Field(default="pipe_catalog", validation_alias="DB_NAME")
    DB_USER: str = Field(default="postgres", validation_alias="DB_USER")
    DB_PASSWORD: str = Field(default="postgres", validation_alias="DB_PASSWORD")

    # Connection pool settings (PostgreSQL only)
    DB_POOL_SIZE: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    DB_MAX_OVERFLOW: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    DB_ECHO: bool = Field(default=False, validation_alias="DB_ECHO")

    # =========================================================================
    # Logging
    # =========================================================================
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=True, validation_alias="LOG_TO_FILE")

    # =========================================================================
    # Search
    # =========================================================================
    SEARCH_DEFAULT_LIMIT: int = Field(default=12, validation_alias="SEARCH_DEFAULT_LIMIT")
    SEARCH_MAX_LIMIT: int = Field(default=100, validation_alias="SEARCH_MAX_LIMIT")
    IMAGE_URL_PREFIX: str = Field(default="/api/images", validation_alias="IMAGE_URL_PREFIX")

    # =========================================================================
    # HTTP
    # =========================================================================
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )
    API_HOST: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    API_PORT: int = Field(default=8000, validation_alias="API_PORT")
    CATALOG_API_URL: str = Field(default="http://127.0.0.1:8000", validation_alias="CATALOG_API_URL")
    CLIENT_TIMEOUT: float = Field(default=10.0, validation_alias="CLIENT_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
