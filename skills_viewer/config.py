"""
Configuration settings for the Skills Viewer dashboard.

Uses Pydantic Settings to load environment variables for the database
connection pool, the HTTP server, the dashboard's internal API calls, and
logging.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment-backed settings.

    The database is PostgreSQL, so `DB_PORT` defaults to 5432. Deployments
    carried over from the earlier MySQL setup, which used 3306, must point
    `DB_PORT` at the PostgreSQL listener explicitly.
    `DB_CONNECT_TIMEOUT_S` bounds both the initial connect and the wait for a
    pooled connection.
    """

    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASS")
    db_name: str = Field("nursing_skills", alias="DB_NAME")
    db_schema: str = Field("public", alias="DB_SCHEMA")
    db_ssl: bool = Field(False, alias="DB_SSL")

    # Pool
    db_conn_limit: int = Field(5, ge=1, alias="DB_CONN_LIMIT")
    db_idle_timeout_s: float = Field(60.0, gt=0, alias="DB_IDLE_TIMEOUT_S")
    db_connect_timeout_s: int = Field(10, ge=1, alias="DB_CONNECT_TIMEOUT_S")

    # HTTP server and dashboard
    app_host: str = Field("127.0.0.1", alias="APP_HOST")
    app_port: int = Field(3001, alias="APP_PORT")
    base_url: str = Field("http://localhost:3001", alias="BASE_URL")
    upstream_timeout_s: float = Field(30.0, gt=0, alias="UPSTREAM_TIMEOUT_S")
    expose_error_details: bool = Field(False, alias="EXPOSE_ERROR_DETAILS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
