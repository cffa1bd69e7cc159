"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_STORE_BACKENDS = ("dynamodb", "memory")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Secrets should never be committed to code - use .env file (gitignored).
    """

    # Table Configuration
    table_name: str = Field(
        default="BlogContent",
        description="Name of the single table holding users, blogs and comments"
    )
    store_backend: str = Field(
        default="dynamodb",
        description="Entity store implementation: 'dynamodb' or 'memory'"
    )

    # DynamoDB Connection
    dynamodb_endpoint_url: Optional[str] = Field(
        default="http://localhost:8000",
        description="DynamoDB endpoint (DynamoDB Local by default, empty for AWS)"
    )
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region used by the DynamoDB client"
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="AWS access key (DynamoDB Local accepts any value)"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="AWS secret key (DynamoDB Local accepts any value)"
    )

    # Store call behaviour
    store_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout applied to every individual store call"
    )
    store_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for transient store failures (throttling, connection)"
    )
    store_retry_base_delay: float = Field(
        default=0.2,
        ge=0.0,
        description="Initial backoff delay in seconds between store retries"
    )

    # Security Configuration
    password_hash_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor used when hashing user passwords"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Emit structured JSON logs (False for plain text)"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """
        Validate table name against DynamoDB naming rules.

        3-255 characters of a-z, A-Z, 0-9, '_', '-', '.'.
        """
        v = v.strip()
        if not 3 <= len(v) <= 255:
            raise ValueError(
                f"TABLE_NAME must be 3-255 characters long. Got: {v!r}"
            )
        allowed = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.")
        if any(ch not in allowed for ch in v):
            raise ValueError(
                f"TABLE_NAME may only contain letters, digits, '_', '-' and '.'. Got: {v!r}"
            )
        return v

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Normalize and validate the store backend name."""
        v = v.strip().lower()
        if v not in VALID_STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of: {', '.join(VALID_STORE_BACKENDS)}. "
                f"Got: {v!r}"
            )
        return v

    @field_validator("dynamodb_endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Validate endpoint URL format.

        Empty string means "use the AWS default endpoint" and becomes None.
        """
        if v is None or v.strip() == "":
            return None
        v = v.strip()
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError(
                f"DYNAMODB_ENDPOINT_URL must start with http:// or https://. "
                f"Got: {v[:30]}..."
            )
        return v.rstrip("/")

    @field_validator("store_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"STORE_TIMEOUT_SECONDS must be positive, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}. Got: {v!r}"
            )
        return v


def get_settings() -> Settings:
    """
    Load a fresh Settings instance from the current environment.

    Returns:
        Settings populated from environment variables and .env
    """
    return Settings()


# Global settings instance
# Import this instance throughout the application
settings = Settings()
