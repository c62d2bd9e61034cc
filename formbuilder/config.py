"""Application configuration module."""

from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Storage settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/formbuilder.db"
    SQL_ECHO: bool = False
    STORAGE_BACKEND: str = "sql"

    # Submission settings
    REQUIRE_EXISTING_FORM: bool = False

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_FILE: str = ""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Form Builder"
    CORS_ALLOW_ORIGINS: str = "http://localhost:3000"

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Validate storage backend"""
        v = v.strip().lower()
        if v not in ("sql", "memory"):
            raise ValueError(f"Invalid storage backend: {v}. Must be 'sql' or 'memory'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """Get the allowed CORS origins as a list"""
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


# Create global settings instance
settings = Settings()
