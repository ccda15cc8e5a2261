# supportdesk/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./supportdesk.db")
    APP_NAME: str = "Support Desk API"
    APP_DESC: str = "Ticketing backend with an AI agent webhook and human escalation"
    APP_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"

    # AI agent webhook
    WEBHOOK_TICKET_URL: str = "http://localhost:5678/webhook/ticket"
    WEBHOOK_TIMEOUT: float = 30.0  # seconds, no retries

    # CORS origins, comma separated
    CORS_ORIGINS: str | None = None

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
