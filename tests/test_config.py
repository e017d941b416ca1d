from __future__ import annotations

from pathlib import Path

import pytest

from notes_app import config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)

    settings = config.load_settings()

    assert settings.auth.credential_expiry_margin_seconds == 60
    assert settings.notes.table_name == "notes"
    assert settings.cognito.is_configured is False
    assert settings.api_gateway.url is None
    assert Path(settings.auth.token_store_path).is_absolute()


def test_cognito_and_api_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COGNITO_REGION", "eu-west-1")
    monkeypatch.setenv("COGNITO_USER_POOL_ID", "eu-west-1_Pool")
    monkeypatch.setenv("COGNITO_APP_CLIENT_ID", "client")
    monkeypatch.setenv("COGNITO_IDENTITY_POOL_ID", "eu-west-1:pool")
    monkeypatch.setenv("API_GATEWAY_URL", "https://api.example.com/prod/")
    monkeypatch.delenv("API_GATEWAY_REGION", raising=False)
    monkeypatch.delenv("S3_REGION", raising=False)

    settings = config.load_settings()

    assert settings.cognito.is_configured is True
    assert settings.api_gateway.url == "https://api.example.com/prod"
    # Service regions fall back to the Cognito region.
    assert settings.api_gateway.region == "eu-west-1"
    assert settings.storage.region == "eu-west-1"


def test_load_settings_is_cached() -> None:
    assert config.load_settings() is config.load_settings()


def test_env_int_invalid_value_returns_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_INVALID", "not_a_number")
    assert config._env_int("TEST_INT_INVALID", 42) == 42


def test_env_int_uses_default_for_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_VALUE", "")
    assert config._env_int("TEST_INT_VALUE", 7) == 7


def test_env_str_blank_is_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_STR_VALUE", "   ")
    assert config._env_str("TEST_STR_VALUE") is None


def test_invalid_margin_raises_runtime_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_CREDENTIAL_EXPIRY_MARGIN_SECONDS", "-5")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        config.load_settings()


def test_relative_paths_resolve_under_project_root() -> None:
    resolved = config._resolve_path("data/session.json")
    assert resolved == str((config._project_root() / "data" / "session.json").resolve())
