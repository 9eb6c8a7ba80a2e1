"""
Configuration management using pydantic-settings.

Loads configuration from environment variables with validation and type conversion.
"""

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Service Configuration
    dashboard_api_port: int = Field(default=4060, alias="DASHBOARD_API_PORT")
    dashboard_api_key: Optional[str] = Field(default=None, alias="DASHBOARD_API_KEY")
    dashboard_api_log_level: str = Field(default="INFO", alias="DASHBOARD_API_LOG_LEVEL")
    dashboard_api_service_name: str = Field(default="prediction-dashboard", alias="DASHBOARD_API_SERVICE_NAME")

    # Document store (PostgreSQL JSONB documents)
    postgres_host: str = Field(default="postgres", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")
    postgres_db: str = Field(default="predictions", alias="POSTGRES_DB")
    postgres_user: str = Field(default="postgres", alias="POSTGRES_USER")
    postgres_password: str = Field(default="postgres", alias="POSTGRES_PASSWORD")
    document_store_table: str = Field(default="documents", alias="DOCUMENT_STORE_TABLE")
    document_store_pool_min_size: int = Field(default=1, alias="DOCUMENT_STORE_POOL_MIN_SIZE")
    document_store_pool_max_size: int = Field(default=5, alias="DOCUMENT_STORE_POOL_MAX_SIZE")

    # Collections written by the prediction process
    predictions_collection: str = Field(default="bitcoin_predictions", alias="PREDICTIONS_COLLECTION")
    system_status_collection: str = Field(default="system_status", alias="SYSTEM_STATUS_COLLECTION")
    heartbeat_document_id: str = Field(default="heartbeat", alias="HEARTBEAT_DOCUMENT_ID")
    model_performance_collection: str = Field(default="model_performance", alias="MODEL_PERFORMANCE_COLLECTION")

    # Price feed
    price_feed_url: str = Field(
        default="https://min-api.cryptocompare.com/data/price",
        alias="PRICE_FEED_URL",
    )
    price_feed_symbol: str = Field(default="BTC", alias="PRICE_FEED_SYMBOL")
    price_feed_currency: str = Field(default="USD", alias="PRICE_FEED_CURRENCY")
    price_feed_timeout_seconds: float = Field(default=10.0, alias="PRICE_FEED_TIMEOUT_SECONDS")

    # Statistics
    stats_window_days: int = Field(default=7, ge=1, alias="STATS_WINDOW_DAYS")
    recent_predictions_limit: int = Field(default=30, ge=1, alias="RECENT_PREDICTIONS_LIMIT")
    pending_predictions_limit: int = Field(default=100, ge=1, alias="PENDING_PREDICTIONS_LIMIT")
    history_predictions_limit: int = Field(default=500, ge=1, alias="HISTORY_PREDICTIONS_LIMIT")

    # Refresh loop
    dashboard_refresh_interval_seconds: float = Field(default=30.0, gt=0, alias="DASHBOARD_REFRESH_INTERVAL_SECONDS")
    dashboard_refresh_enabled: bool = Field(default=True, alias="DASHBOARD_REFRESH_ENABLED")

    # Heartbeat thresholds shared by the status resolver and the dashboard view
    heartbeat_delayed_minutes: float = Field(default=2.0, gt=0, alias="HEARTBEAT_DELAYED_MINUTES")
    heartbeat_offline_minutes: float = Field(default=10.0, gt=0, alias="HEARTBEAT_OFFLINE_MINUTES")

    # The prediction process writes naive WIB timestamps
    store_timezone: str = Field(default="Asia/Jakarta", alias="STORE_TIMEZONE")

    @field_validator("dashboard_api_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("store_timezone")
    @classmethod
    def validate_store_timezone(cls, v: str) -> str:
        """Validate the timezone name is known to zoneinfo."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def database_url_async(self) -> str:
        """Get async PostgreSQL connection URL for asyncpg."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def store_tzinfo(self) -> ZoneInfo:
        """Timezone applied to naive timestamps read from the store."""
        return ZoneInfo(self.store_timezone)

    def validate_on_startup(self) -> None:
        """
        Validate cross-field configuration on startup.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        from ..exceptions import ConfigurationError

        errors = []

        if not 1 <= self.dashboard_api_port <= 65535:
            errors.append(f"Dashboard API port must be between 1 and 65535, got {self.dashboard_api_port}")

        if not 1 <= self.postgres_port <= 65535:
            errors.append(f"PostgreSQL port must be between 1 and 65535, got {self.postgres_port}")

        if self.heartbeat_delayed_minutes > self.heartbeat_offline_minutes:
            errors.append(
                f"HEARTBEAT_DELAYED_MINUTES ({self.heartbeat_delayed_minutes}) must not exceed "
                f"HEARTBEAT_OFFLINE_MINUTES ({self.heartbeat_offline_minutes})"
            )

        if self.document_store_pool_min_size > self.document_store_pool_max_size:
            errors.append(
                f"DOCUMENT_STORE_POOL_MIN_SIZE ({self.document_store_pool_min_size}) must not exceed "
                f"DOCUMENT_STORE_POOL_MAX_SIZE ({self.document_store_pool_max_size})"
            )

        if not self.price_feed_url.startswith(("http://", "https://")):
            errors.append(f"PRICE_FEED_URL must be an http(s) URL, got {self.price_feed_url}")

        if errors:
            raise ConfigurationError("Configuration validation failed: " + "; ".join(errors))


# Global settings instance
settings = Settings()
