from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# -------------------------------------------------
# Explicitly load .env
# -------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./smartauto.db"
    DB_ECHO: bool = False
    ENVIRONMENT: str = "development"

    # JWT: accept SECRET_KEY or JWT_SECRET
    SECRET_KEY: str = Field(
        default="smartauto-secret-key-change-in-production",
        validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, description="Bearer token lifetime (7 days)")

    # Registering with this key yields an admin account. Leave empty to disable.
    ADMIN_API_KEY: str = ""

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    # Seeded on startup when no admin exists
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "Admin@123"
    DEFAULT_ADMIN_EMAIL: str = "admin@smartauto.local"

    class Config:
        extra = "ignore"
        env_file = str(ENV_PATH)
        env_file_encoding = "utf-8"


settings = Settings()
