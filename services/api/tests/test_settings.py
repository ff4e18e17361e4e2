"""Tests for `petstore_api.settings`."""

import pytest

from petstore_api.settings import Settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("PORT", "APP_VERSION", "APP_COLOR", "INSTANCE_UUID", "DB_ENV_FALLBACK"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 8082
    assert settings.app_version == "1.0.0"
    assert settings.app_color == "blue"
    assert settings.db_env_fallback is True
    assert len(settings.instance_uuid) == 36


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("APP_COLOR", "green")
    monkeypatch.setenv("INSTANCE_UUID", "fixed")
    monkeypatch.setenv("DB_ENV_FALLBACK", "false")

    settings = Settings(_env_file=None)

    assert settings.port == 9000
    assert settings.app_color == "green"
    assert settings.instance_uuid == "fixed"
    assert settings.db_env_fallback is False
