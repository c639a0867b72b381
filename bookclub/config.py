"""Application configuration"""

import logging
from functools import lru_cache
from typing import Optional, List

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "dev-secret-change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Triple A Book Club API"
    debug: bool = False
    app_url: str = "https://tripleabookclub.com"  # Public site, used for links in emails
    cors_origins: List[str] = ["http://localhost:3000"]

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    session_max_age_days: int = 30
    bcrypt_rounds: int = 12
    reset_token_expire_minutes: int = 60
    invite_token_expire_days: int = 7

    # Database
    database_path: str = "/app/data/bookclub.json"

    # Email
    email_provider: str = "sendgrid"  # "sendgrid" or "office365"
    email_from_email: Optional[str] = None
    email_from_name: str = "Triple A Book Club"
    sendgrid_api_key: Optional[str] = None
    smtp_host: str = "smtp.office365.com"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def validate_production_settings(settings: Settings) -> list:
    """Validate that all required settings are configured for production"""
    errors = []

    if settings.secret_key == DEFAULT_SECRET_KEY:
        errors.append("SECRET_KEY must be changed from default value")

    if not settings.email_from_email:
        errors.append("EMAIL_FROM_EMAIL is required to send account emails")

    if settings.email_provider == "sendgrid" and not settings.sendgrid_api_key:
        errors.append("SENDGRID_API_KEY is not set; emails will only be logged")

    if settings.email_provider == "office365" and not (settings.smtp_username and settings.smtp_password):
        errors.append("SMTP_USERNAME and SMTP_PASSWORD are required for Office 365")

    return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Convenience access
settings = get_settings()
