from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite:///./leave_tracker.db"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30
    password_hash_iterations: int = 600_000

    # App
    app_name: str = "College Leave Tracker"
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings built from the environment on first use."""
    return Settings()


def get_request_settings(request: Request) -> Settings:
    """Dependency returning the settings the running application was built with."""
    return request.app.state.settings
