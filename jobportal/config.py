# jobportal/config.py

from __future__ import annotations
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # --- Core ---
    SECRET_KEY: str = Field("change-me-in-production-signing-key", description="JWT signing key")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24, ge=5, le=60 * 24 * 30)
    DEBUG: bool = True  # set False in prod
    ENVIRONMENT: str = "development"

    # --- Database ---
    DATABASE_URL: str = Field("sqlite:///./jobportal.db")

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON_FORMAT: bool = False
    LOG_FILE: Optional[str] = None  # e.g. "logs/jobportal_{time:YYYY-MM-DD}.log"

    # --- HTTP ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # bcrypt work factor for new password hashes
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)

    # Stored resumes / profile photos live under this directory
    UPLOAD_DIR: str = "uploads"

    # --- Notifications ---
    # Number of worker notifications written per transaction during job-posted fan-out
    NOTIFY_BATCH_SIZE: int = Field(100, ge=1, le=5000)

    # --- Applications ---
    # When True only applied -> {reviewed, accepted, rejected} and reviewed -> {accepted, rejected} are allowed
    STRICT_STATUS_TRANSITIONS: bool = False

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
