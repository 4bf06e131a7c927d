"""StoreIt configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the StoreIt backend."""

    app_name: str = "StoreIt"
    debug: bool = True
    environment: str = "development"
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Appwrite-compatible backend
    appwrite_endpoint: str = "https://cloud.appwrite.io/v1"
    appwrite_project_id: str = ""
    appwrite_api_key: str = ""  # server key, admin client only
    appwrite_database_id: str = ""
    appwrite_users_collection_id: str = ""
    appwrite_files_collection_id: str = ""
    appwrite_bucket_id: str = ""
    request_timeout: float = 30.0

    # Session cookie
    session_cookie_name: str = "appwrite-session"
    sign_in_path: str = "/sign-in"

    avatar_placeholder_url: str = (
        "https://img.freepik.com/free-psd/3d-illustration-person-with-sunglasses_23-2149436188.jpg"
    )

    # Storage limits
    storage_quota_bytes: int = 2 * 1024 * 1024 * 1024  # 2 GB bucket
    max_upload_bytes: int = 50 * 1024 * 1024
    upload_chunk_size: int = 5 * 1024 * 1024  # Appwrite chunk limit

    uvicorn_workers: int = 1

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="STOREIT_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:3000"]

    @field_validator("appwrite_endpoint")
    @classmethod
    def strip_endpoint(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
