from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Pathfinder"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 3001
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/pathfinder.db"
    data_dir: Path = Path("./data")

    cors_origins: str = "*"

    api_base_url: str = "http://127.0.0.1:3001/api"
    api_timeout_sec: int = 30
    initial_load_workers: int = 5

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_timeout_sec: int = 60

    resume_debounce_ms: int = 500
    contact_debounce_ms: int = 500
    settings_debounce_ms: int = 1000

    cover_letter_min_description: int = 50

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
