from decimal import Decimal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables and `.env`.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Storefront Checkout API"
    PROJECT_DESCRIPTION: str = "Order assembly, pricing and inventory reservation for the storefront"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("storefront", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL statements (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections after N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Security
    JWT_SECRET_KEY: str = Field(..., description="Secret used to verify buyer access tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Access token signing algorithm")

    # Checkout
    TAX_RATE: Decimal = Field(Decimal("0.085"), description="Flat sales tax rate applied to the subtotal")
    LOW_STOCK_THRESHOLD: int = Field(5, description="Post-checkout stock at or below this triggers an alert")
    DEFAULT_COUNTRY: str = Field("US", description="Country assumed when the address omits one")
    ORDER_NUMBER_PREFIX: str = Field("LS", description="Prefix for generated order numbers")
    TRACKING_CODE_LENGTH: int = Field(12, description="Length of guest order tracking codes")
    GUEST_DIGITAL_DELIVERY_ENABLED: bool = Field(
        False, description="Issue download grants owned by the guest email for guest digital purchases"
    )
    REQUIRE_LOGIN_FOR_MOBILE_CHECKOUT: bool = Field(
        True, description="Reject anonymous checkout from the mobile client"
    )
    CART_SESSION_COOKIE: str = Field("cart_session", description="Cookie holding the anonymous cart session id")

    # Notifications
    NOTIFICATIONS_WEBHOOK_URL: str | None = Field(
        None, description="Endpoint receiving order confirmation and low-stock events"
    )
    NOTIFICATIONS_TIMEOUT: float = Field(10.0, description="Webhook request timeout in seconds")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="colored, json or plain")

    # Environment
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("development", description="Deployment environment")
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], description="Origins allowed to call the API"
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DEFAULT_COUNTRY")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        if value not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return value

    @field_validator("TAX_RATE")
    @classmethod
    def _tax_rate_range(cls, value: Decimal) -> Decimal:
        if value < 0 or value >= 1:
            raise ValueError("TAX_RATE must be a fraction between 0 and 1")
        return value

    @computed_field
    @property
    def is_development(self) -> bool:
        """True for local and development environments."""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def database_url(self) -> str:
        """Async database URL, also used by Alembic."""
        from storefront.database.async_db import get_async_database_url

        return get_async_database_url(self)


# Cached settings instance
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance.

    Avoids re-reading environment variables on every call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
