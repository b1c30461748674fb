# taskflow/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import validator
from typing import List


class Settings(BaseSettings):
    """Engine settings loaded from .env"""

    # === Database ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./taskflow.db"

    @validator("DATABASE_URL")
    def validate_database_url(cls, v):
        """Ensure database URL is safe for current environment"""
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env == "production" and v.startswith("sqlite"):
            raise ValueError("Production environment cannot use a SQLite database")
        return v

    # === System ===
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @validator("LOG_LEVEL")
    def normalize_log_level(cls, v):
        return v.upper()

    # === Automation ===
    DUE_SOON_DAYS: int = 3
    DEFAULT_TASK_PRIORITY: str = "medium"
    DEFAULT_TASK_STATUS: str = "todo"

    # === Recurrence ===
    WEEKLY_SCAN_DAYS: int = 14

    # === Dependencies ===
    TERMINAL_STATUSES: List[str] = ["done", "completed", "closed"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create a global settings instance
settings = Settings()
