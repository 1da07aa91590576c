"""Settings - environment overrides and validation."""

import pytest
from pydantic import ValidationError

from lazyrest.config import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.body_decode_error_status == 500
    assert settings.request_timeout_seconds is None
    assert settings.demo_prefix == "records"


def test_env_prefix_overrides(monkeypatch):
    monkeypatch.setenv("LAZYREST_PORT", "9000")
    monkeypatch.setenv("LAZYREST_REQUEST_TIMEOUT_SECONDS", "2.5")
    settings = Settings(_env_file=None)
    assert settings.port == 9000
    assert settings.request_timeout_seconds == 2.5


def test_decode_error_status_must_be_error_code():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, body_decode_error_status=200)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
