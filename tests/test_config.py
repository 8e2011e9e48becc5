import logging

import pytest

from course_checkout.config import DEFAULT_DATABASE_URL, Settings
from course_checkout.errors import ConfigurationError

FULL_ENV = {
    "RAZORPAY_KEY_ID": "rzp_test_key",
    "RAZORPAY_KEY_SECRET": "rzp_test_secret",
    "DATABASE_URL": "postgresql://localhost/courses",
    "UPSTREAM_TIMEOUT": "4.5",
    "PORT": "8080",
    "LOG_LEVEL": "debug",
}


def test_from_env_reads_all_settings():
    settings = Settings.from_env(FULL_ENV)

    assert settings.razorpay_key_id == "rzp_test_key"
    assert settings.database_url == "postgresql://localhost/courses"
    assert settings.upstream_timeout == 4.5
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.strict is False
    assert settings.missing() == []


def test_missing_settings_are_warnings(caplog):
    settings = Settings.from_env({})

    with caplog.at_level(logging.WARNING):
        settings.validate()

    assert settings.effective_database_url == DEFAULT_DATABASE_URL
    assert "RAZORPAY_KEY_SECRET is not set" in caplog.text
    assert "DATABASE_URL is not set" in caplog.text


def test_strict_mode_refuses_missing_settings():
    settings = Settings.from_env({"STRICT_CONFIG": "true", "RAZORPAY_KEY_ID": "rzp_test_key"})

    with pytest.raises(ConfigurationError) as info:
        settings.validate()

    assert "RAZORPAY_KEY_SECRET" in str(info.value)
