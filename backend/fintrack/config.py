"""
Application settings.

Read from environment variables and an optional .env file. The storage
backend is chosen here explicitly and handed to whatever composes the app.
"""
from typing import Literal

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Fintrack settings. Defaults give an in-memory store seeded with demo data."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    storage_backend: Literal["memory", "database"] = "memory"
    database_url: str = "sqlite:///./fintrack.db"
    auto_create_tables: bool = False
    seed_defaults: bool = True
    account_delete_policy: Literal["reject", "cascade"] = "reject"
    log_level: str = "INFO"
    api_docs_enabled: bool = False

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        # Use the psycopg 3 driver for bare PostgreSQL URLs
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()
