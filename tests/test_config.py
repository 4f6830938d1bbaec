import logging

from passvault.client.config import Settings, configure_logging, get_app_data_path


def test_defaults_point_into_app_data(monkeypatch):
    monkeypatch.delenv("PASSVAULT_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL.startswith("sqlite:///")
    assert settings.DATABASE_URL.endswith(f"{get_app_data_path().name}/vault.db")
    assert settings.GENERATOR_DEFAULT_LENGTH == 16


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PASSVAULT_GENERATOR_DEFAULT_LENGTH", "24")
    monkeypatch.setenv("PASSVAULT_DB_ECHO", "true")
    settings = Settings(_env_file=None)
    assert settings.GENERATOR_DEFAULT_LENGTH == 24
    assert settings.DB_ECHO is True


def test_configure_logging_accepts_lowercase_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    configure_logging("debug")
    assert calls["level"] == "DEBUG"
