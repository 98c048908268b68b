"""Feedback board configuration settings."""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Database
    DATABASE_URL: Optional[str] = None

    # Access tokens
    TOKEN_EXPIRE_MINUTES: int = 0  # 0 means tokens never expire

    # Application
    APP_NAME: str = "Product Feedback Board"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Listing
    DEFAULT_PER_PAGE: int = 15
    MAX_PER_PAGE: int = 100
    FEEDBACK_COMMENT_DEPTH: int = 1

    # Mentions
    RECORD_SELF_MENTIONS: bool = True

    # Logging
    LOG_LEVEL: str = "info"
    LOG_JSON: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @property
    def cors_origins_list(self) -> List[str]:
        """Return the configured CORS origins as a sanitized list."""

        if not self.CORS_ORIGINS:
            return []

        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
