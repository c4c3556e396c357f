from typing import Any

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration backed by Pydantic BaseSettings.
    Values are loaded from environment variables (and an optional .env file).
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Wholesale Marketplace Payments API"
    PROJECT_DESCRIPTION: str = "Mercado Pago webhook reconciliation and order fulfillment"
    VERSION: str = "0.1.0"

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("marketplace", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DATABASE_URL: str | None = Field(None, description="Full async database URL, overrides DB_* values")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout to obtain a pooled connection")

    # Mercado Pago
    MERCADO_PAGO_ACCESS_TOKEN: str = Field(
        "",
        validation_alias=AliasChoices(
            "MERCADO_PAGO_ACCESS_TOKEN",
            "MERCADOPAGO_ACCESS_TOKEN",
            "MP_ACCESS_TOKEN",
        ),
        description="Bearer token for the Mercado Pago REST API",
    )
    MERCADO_PAGO_BASE_URL: str = Field("https://api.mercadopago.com", description="Mercado Pago API base URL")
    MERCADO_PAGO_TIMEOUT: float = Field(10.0, description="Gateway request timeout in seconds")
    MERCADO_PAGO_WEBHOOK_SECRET: str = Field(
        "",
        validation_alias=AliasChoices(
            "MERCADO_PAGO_WEBHOOK_SECRET",
            "NEXT_WEBHOOK_MERCADOPAGO_KEY_SECRET",
        ),
        description="Shared secret expected in the webhook 'secret' query parameter",
    )

    # E-mail (Resend)
    RESEND_API_KEY: str | None = Field(None, description="Resend API key; e-mail is disabled when empty")
    RESEND_API_URL: str = Field("https://api.resend.com", description="Resend API base URL")
    EMAIL_FROM_PAYMENTS: str = Field(
        "Pagos <no-reply@marketplace.local>", description="Sender for payment notifications"
    )
    EMAIL_TIMEOUT: float = Field(10.0, description="E-mail provider timeout in seconds")
    APP_BASE_URL: str = Field("http://localhost:3000", description="Public storefront URL used in e-mails")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("MERCADO_PAGO_TIMEOUT", "EMAIL_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Timeouts must be greater than zero")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Synchronous PostgreSQL URL (used by Alembic)."""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def email_enabled(self) -> bool:
        return bool(self.RESEND_API_KEY)


# Cached settings instance
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.
    Environment variables are read only once per process.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
