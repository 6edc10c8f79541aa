"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # API Configuration
    api_title: str = Field(default="Billing Core")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Bulk dispatch
    dispatch_max_chunk_size: int = Field(default=100, ge=1, description="Provider per-call recipient limit")
    dispatch_default_chunk_size: int = Field(default=100, ge=1)

    # Notifications
    due_soon_window_days: int = Field(default=3, ge=0)

    # Email Configuration
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    smtp_timeout_seconds: float = Field(default=30.0, gt=0)
    email_from_name: str = Field(default="Billing")
    email_from_address: str = Field(default="noreply@example.com")

    # Localization
    default_currency: str = Field(default="EUR")

    # Admin roles accepted for privileged operations
    admin_roles: str | List[str] = Field(default="admin")

    @field_validator("admin_roles", mode="before")
    @classmethod
    def parse_admin_roles(cls, v):
        """Parse admin roles from comma-separated string or list."""
        if isinstance(v, str):
            if not v.strip():
                return ["admin"]
            return [role.strip() for role in v.split(",") if role.strip()]
        elif v is None:
            return ["admin"]
        return v

    @field_validator("dispatch_default_chunk_size")
    @classmethod
    def validate_default_chunk_size(cls, v, info):
        """Default chunk size cannot exceed the provider limit."""
        max_size = info.data.get("dispatch_max_chunk_size")
        if max_size is not None and v > max_size:
            raise ValueError("dispatch_default_chunk_size cannot exceed dispatch_max_chunk_size")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def smtp_configured(self) -> bool:
        """Check if SMTP delivery is fully configured."""
        return all([
            self.smtp_host,
            self.smtp_user,
            self.smtp_password
        ])

    def validate_environment(self) -> None:
        """Validate that all required environment variables are set."""
        required_vars = [
            "smtp_host",
            "smtp_user",
            "smtp_password",
            "email_from_address"
        ]

        missing_vars = []
        for var in required_vars:
            if not getattr(self, var, None):
                missing_vars.append(var.upper())

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings


# Create a global settings instance
settings = get_settings()
