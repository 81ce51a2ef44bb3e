"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest

from incell.settings import AppSettings

_ENV_VARS = (
    "INCELL_HOST",
    "INCELL_PORT",
    "INCELL_BAUD_RATE",
    "INCELL_LOG_LEVEL",
    "INCELL_LOG_JSON",
    "INCELL_STORAGE_SECRET",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = AppSettings.from_env()

    assert settings.host == "127.0.0.1"
    assert settings.port == 8080
    assert settings.baud_rate == 115200
    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert len(settings.storage_secret) == 64


def test_overrides(monkeypatch):
    monkeypatch.setenv("INCELL_HOST", "0.0.0.0")
    monkeypatch.setenv("INCELL_PORT", "9000")
    monkeypatch.setenv("INCELL_BAUD_RATE", "9600")
    monkeypatch.setenv("INCELL_LOG_LEVEL", "debug")
    monkeypatch.setenv("INCELL_LOG_JSON", "yes")
    monkeypatch.setenv("INCELL_STORAGE_SECRET", "s3cret")

    settings = AppSettings.from_env()

    assert settings.host == "0.0.0.0"
    assert settings.port == 9000
    assert settings.baud_rate == 9600
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.storage_secret == "s3cret"


def test_malformed_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("INCELL_PORT", "eighty")

    assert AppSettings.from_env().port == 8080


def test_secret_not_in_repr():
    assert "storage_secret" not in repr(AppSettings(storage_secret="hidden"))
