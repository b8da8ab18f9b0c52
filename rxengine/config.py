"""
Application Configuration Settings
Prescription Lifecycle & Smart Reorder Service
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Application
    APP_NAME: str = "Prescription Lifecycle Service"
    APP_VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite:///./rxengine.db"

    # Authentication (tokens are issued by the storefront auth service)
    JWT_SECRET_KEY: str = "change-this-jwt-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Security
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]

    # Prescriptions
    STORE_TIMEZONE: str = "Asia/Dhaka"  # Calendar used to count remaining validity days
    ADMIN_PAGE_SIZE_MAX: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
