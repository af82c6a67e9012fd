"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "firebase"] = "firebase"
    firebase_project_id: str | None = None
    firebase_audience: str | None = None
    firebase_service_account_json: str | None = None
    store_backend: Literal["memory", "firestore"] = "memory"
    session_cookie_name: str = "session"
    session_max_age_days: int = Field(default=7, ge=7, le=14)
    session_cookie_secure: bool = False
    debug_routes_enabled: bool = False

    model_config = SettingsConfigDict(env_prefix="ORGCHAT_", extra="ignore")

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_days * 24 * 60 * 60


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
