"""
Unit tests for configuration management.
"""

import pytest
from pydantic import ValidationError
from src.config.settings import Settings, settings
from src.exceptions import ConfigurationError


def test_settings_loaded():
    """Test that settings are loaded correctly."""
    assert settings.dashboard_api_port == 4060
    assert settings.dashboard_api_service_name == "prediction-dashboard"
    assert settings.predictions_collection == "bitcoin_predictions"


def test_heartbeat_threshold_defaults():
    """Test the shared heartbeat thresholds."""
    defaults = Settings()
    assert defaults.heartbeat_delayed_minutes == 2.0
    assert defaults.heartbeat_offline_minutes == 10.0


def test_database_url_format():
    """Test that database URL is formatted correctly."""
    db_url = settings.database_url_async
    assert db_url.startswith("postgresql://")
    assert settings.postgres_host in db_url
    assert settings.postgres_db in db_url


def test_log_level_is_normalised():
    """Test that the log level is upper-cased."""
    assert Settings(DASHBOARD_API_LOG_LEVEL="debug").dashboard_api_log_level == "DEBUG"


def test_invalid_log_level_rejected():
    """Test that unknown log levels are rejected."""
    with pytest.raises(ValidationError):
        Settings(DASHBOARD_API_LOG_LEVEL="chatty")


def test_store_timezone():
    """Test timezone parsing and validation."""
    assert Settings(STORE_TIMEZONE="UTC").store_tzinfo.key == "UTC"
    with pytest.raises(ValidationError):
        Settings(STORE_TIMEZONE="Mars/Olympus_Mons")


def test_configuration_validation():
    """Test that configuration validation works."""
    # This should not raise an error if config is valid
    try:
        Settings().validate_on_startup()
    except ConfigurationError:
        pytest.fail("Configuration validation should pass with valid settings")


def test_configuration_validation_rejects_inverted_thresholds():
    """Test that the delayed threshold may not exceed the offline threshold."""
    with pytest.raises(ConfigurationError) as exc_info:
        Settings(HEARTBEAT_DELAYED_MINUTES=15, HEARTBEAT_OFFLINE_MINUTES=10).validate_on_startup()

    assert "HEARTBEAT_DELAYED_MINUTES" in exc_info.value.message
