# complaints/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./complaints.db")
    APP_NAME: str = "Campus Complaints API"
    APP_DESC: str = "University complaint and ticketing service"
    APP_VERSION: str = "1.0.0"

    # CORS origins, comma separated
    CORS_ORIGINS: str | None = None

    LOG_LEVEL: str = "INFO"

    # Auth
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7

    # Tickets
    TICKET_ID_PREFIX: str = "ASTU"
    TICKET_ID_MAX_RETRIES: int = 5

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    ALLOWED_UPLOAD_TYPES: list[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    ]

    NOTIFICATION_PAGE_SIZE: int = 20

    # Chatbot; without a key it answers from keyword rules
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    CHATBOT_TIMEOUT_SECONDS: float = 15.0

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
