"""
Конфигурация приложения
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Настройки приложения"""

    # Database
    DATABASE_URL: str = "sqlite:///./salon.db"

    # Security
    SECRET_KEY: str = "local-development-secret-key-change-in-production"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7  # 7 дней

    # Admin Panel
    ADMIN_PASSWORD: str = "admin123"

    # Email (подтверждения и отмены для клиентов)
    SMTP_HOST: Optional[str] = None  # smtp.gmail.com
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None  # app password
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = "noreply@salon.local"

    # Telegram для САЛОНА (новые записи и отмены)
    TELEGRAM_SALON_BOT_TOKEN: Optional[str] = None
    TELEGRAM_SALON_CHAT_ID: Optional[str] = None

    # Application
    SITE_URL: str = "http://localhost:8000"

    # Booking Settings
    DEFAULT_SERVICE_DURATION_MINUTES: int = 30
    NEXT_SLOTS_DEFAULT_LIMIT: int = 5
    NEXT_SLOTS_HORIZON_DAYS: int = 14

    # Development
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        # Путь к .env относительно корня проекта
        env_file = Path(__file__).resolve().parent.parent.parent / ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Получить настройки приложения (с кешированием)"""
    return Settings()
