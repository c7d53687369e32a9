"""
SiteKeeper Core Configuration
Environment-driven settings for storage, hashing and recovery keys.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    SiteKeeper Configuration Settings
    """

    # Application
    APP_NAME: str = "SiteKeeper"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DIR: Path = Path("logs")
    LOG_TO_FILE: bool = True

    # Recovery keys
    RECOVERY_KEYS_OPTION_NAME: str = "recovery_keys"
    RECOVERY_KEY_LENGTH: int = 22
    RECOVERY_KEY_TTL: int = 60 * 60 * 24  # 1 day

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str) and v:
            return v
        # Default to SQLite for development
        return "sqlite:///./sitekeeper.db"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("LOG_DIR", mode="before")
    @classmethod
    def coerce_log_dir(cls, v: Any) -> Path:
        return Path(v) if not isinstance(v, Path) else v

    @field_validator("RECOVERY_KEYS_OPTION_NAME")
    @classmethod
    def validate_option_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("RECOVERY_KEYS_OPTION_NAME must not be empty")
        return v.strip()

    @field_validator("RECOVERY_KEY_LENGTH")
    @classmethod
    def validate_key_length(cls, v: int) -> int:
        if v < 8:
            raise ValueError("RECOVERY_KEY_LENGTH must be at least 8")
        return v

    @field_validator("RECOVERY_KEY_TTL")
    @classmethod
    def validate_key_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("RECOVERY_KEY_TTL must be positive")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
