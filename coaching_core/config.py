"""
Platform Configuration Management

Centralizes all configuration for the coaching platform backend.
Supports multiple environments (local, dev, prod) with .env file support.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported deployment environments."""

    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


class PlatformConfig(BaseSettings):
    """
    Platform-wide configuration settings.

    Loads from environment variables with .env file support.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(default=Environment.LOCAL)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Database (institutes, batches and users all live here)
    mongo_db_url: str = Field(default="mongodb://localhost:27017")
    mongo_db_name: str = Field(default="coaching_platform")

    # Logging
    log_level: str = Field(default="INFO")

    # CORS Configuration
    allowed_origins: str = Field(default="*")

    # Institute provisioning
    api_key_prefix: str = Field(default="ID")
    api_key_max_attempts: int = Field(default=5, ge=1)

    # Content updates
    batch_update_max_attempts: int = Field(default=5, ge=1)

    @field_validator("api_key_prefix")
    @classmethod
    def validate_api_key_prefix(cls, v: str) -> str:
        """Ensure the prefix can be embedded in a URL path segment."""
        if not v or not v.replace("_", "").isalnum():
            raise ValueError("api_key_prefix must be alphanumeric")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    def get_allowed_origins_list(self) -> list[str]:
        """Parse CORS allowed origins into a list."""
        origins = [origin.strip() for origin in self.allowed_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PROD

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == Environment.LOCAL


@lru_cache()
def get_config() -> PlatformConfig:
    """
    Get cached platform configuration.

    Uses lru_cache to ensure config is loaded only once.
    """
    return PlatformConfig()


# Export for easy importing
config = get_config()
