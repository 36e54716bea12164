"""Application settings configuration module.

Defines the Settings class that manages environment-based
configuration using pydantic-settings. Settings are read once at
process start and never re-read per request.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import (
    BaseSettings,  # pydantic-settings v2
    SettingsConfigDict,
    )


class Settings(BaseSettings):
    """Environment variables for the external collaborators and logging."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    backend_url: str = "https://twitter-api-1-cv0c.onrender.com"
    backend_timeout_s: float = 60.0

    gemini_api_key: Optional[str] = None
    llm_model: str = "gemini-1.5-flash"
    llm_temperature: float = 0.2

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def has_llm_credential(self) -> bool:
        return bool(self.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
