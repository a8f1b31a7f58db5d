"""Tests unitarios para la configuración."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_environment_info, get_settings, reload_settings, validate_required_settings


def _settings(**overrides):
    values = {
        "WEBHOOK_TOKEN": "token",
        "PROVIDER_API_URL": "https://provider.test/api/v2",
        "PROVIDER_API_KEY": "key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_required_settings_present():
    """Con los tres secretos configurados la validación pasa."""
    assert validate_required_settings(_settings()) is True


def test_missing_secrets_are_reported():
    """Debe listar los secretos vacíos o en blanco."""
    settings = _settings(WEBHOOK_TOKEN="", PROVIDER_API_KEY=" ")

    with pytest.raises(ValueError) as exc_info:
        validate_required_settings(settings)

    assert "WEBHOOK_TOKEN" in str(exc_info.value)
    assert "PROVIDER_API_KEY" in str(exc_info.value)
    assert "PROVIDER_API_URL" not in str(exc_info.value)


def test_provider_url_must_be_http():
    """La URL del proveedor debe ser http(s)."""
    with pytest.raises(ValidationError):
        _settings(PROVIDER_API_URL="ftp://provider.test")


def test_timeouts_must_be_positive():
    """Los deadlines del proveedor deben ser mayores que cero."""
    with pytest.raises(ValidationError):
        _settings(PROVIDER_REQUEST_TIMEOUT_SECONDS=0)


def test_allowed_hosts_list():
    """ALLOWED_HOSTS se parsea como lista separada por comas."""
    settings = _settings(ALLOWED_HOSTS="https://shop.example.com, https://admin.example.com")

    assert settings.allowed_hosts_list == ["https://shop.example.com", "https://admin.example.com"]
    assert _settings().allowed_hosts_list == []


def test_log_level_is_normalized():
    """El nivel de log se normaliza a mayúsculas."""
    assert _settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_reload_settings_picks_up_environment_changes(monkeypatch):
    """reload_settings descarta la instancia cacheada y relee el entorno."""
    original = get_settings()
    monkeypatch.setenv("PROVIDER_REQUEST_TIMEOUT_SECONDS", "7.5")

    try:
        reloaded = reload_settings()

        assert reloaded is not original
        assert reloaded.PROVIDER_REQUEST_TIMEOUT_SECONDS == 7.5
        assert get_settings() is reloaded
        assert get_environment_info()["provider_timeout_seconds"] == 7.5
    finally:
        monkeypatch.undo()
        reload_settings()


def test_environment_info_hides_secrets():
    """La info de entorno no expone token ni API key."""
    info = get_environment_info()

    assert info["app_name"] == get_settings().APP_NAME
    assert get_settings().WEBHOOK_TOKEN not in str(info.values())
    assert get_settings().PROVIDER_API_KEY not in str(info.values())
