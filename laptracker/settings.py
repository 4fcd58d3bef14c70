from __future__ import annotations

from functools import lru_cache

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Security
    LAPTRACKER_SECRET_KEY: str = "dev-secret-change-me"
    LAPTRACKER_SESSION_MAX_AGE: int = 60 * 60 * 12
    LAPTRACKER_ADMIN_EMAIL: str = "admin@example.org"
    LAPTRACKER_ADMIN_PASSWORD: str = "change-me"
    LAPTRACKER_COOKIE_SECURE: bool = False  # set True behind HTTPS

    # Database
    LAPTRACKER_DB_URL: str = "sqlite:///./laptracker.db"

    LAPTRACKER_LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def request_settings(request: Request) -> Settings:
    """Settings of the running app; falls back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()
