"""
Configuration settings for the student roster.

Uses Pydantic Settings to load environment variables for the storage backend,
identifier format, and logging. Values can also come from a local `.env` file.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage
    storage_backend: str = Field("file", alias="ROSTER_STORAGE_BACKEND")
    data_file: str = Field("roster-data.json", alias="ROSTER_DATA_FILE")
    storage_namespace: str = Field("students", alias="ROSTER_STORAGE_NAMESPACE")

    # Identifiers
    id_prefix: str = Field("ST-", alias="ROSTER_ID_PREFIX")
    id_width: int = Field(3, alias="ROSTER_ID_WIDTH", ge=1)

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    # Database (postgres backend only)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("roster", alias="DB_NAME")
    db_table: str = Field("roster_kv", alias="DB_TABLE", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
