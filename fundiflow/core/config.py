# File: fundiflow/core/config.py

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    PROJECT_NAME: str = "FundiFlow API"
    VERSION: str = os.getenv("APP_VERSION", "1.0.0")

    api_v1_prefix: str = "/api/v1"
    environment: str = os.getenv("ENVIRONMENT", "development")
    app_url: str = os.getenv("APP_URL", "http://localhost:9002")

    # CORS
    backend_cors_origins: List[str] = Field(
        default=os.getenv(
            "BACKEND_CORS_ORIGINS", "http://localhost:9002,http://127.0.0.1:9002"
        ),
        validate_default=True,
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./fundiflow.db")

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    access_token_expire_minutes: int = 60 * 24  # 24h
    algorithm: str = "HS256"

    # Email
    email_provider: str = os.getenv("EMAIL_PROVIDER", "console")
    smtp_host: Optional[str] = os.getenv("SMTP_HOST") or None
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: Optional[str] = os.getenv("SMTP_USER") or None
    smtp_pass: Optional[str] = os.getenv("SMTP_PASS") or None
    from_email: str = os.getenv("FROM_EMAIL", "notifications@fundiflow.com")
    from_name: str = os.getenv("FROM_NAME", "FundiFlow")
    debug_email: bool = os.getenv("DEBUG_EMAIL", "false").lower() == "true"

    # AI
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or None
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
