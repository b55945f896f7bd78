# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig
from constants import DEFAULT_ALLOWED_LANGUAGES, DEFAULT_SERVICE_BASE_URL


ENV_VARS = (
    "ENV",
    "LOG_LEVEL",
    "PISTON_BASE_URL",
    "PISTON_TIMEOUT_S",
    "ALLOWED_LANGUAGES",
    "ENABLE_JSON_LOGS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = AppConfig.load_from_env()

    assert config.service_base_url == DEFAULT_SERVICE_BASE_URL
    assert config.allowed_languages == DEFAULT_ALLOWED_LANGUAGES
    assert config.request_timeout_s == 30.0
    assert config.enable_json_logs is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PISTON_BASE_URL", "http://localhost:2000/api/v2/")
    monkeypatch.setenv("PISTON_TIMEOUT_S", "5")
    monkeypatch.setenv("ALLOWED_LANGUAGES", " Python, php,python ,")
    monkeypatch.setenv("ENABLE_JSON_LOGS", "0")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = AppConfig.load_from_env()

    assert config.service_base_url == "http://localhost:2000/api/v2"
    assert config.request_timeout_s == 5.0
    assert config.allowed_languages == ("python", "php")
    assert config.enable_json_logs is False
    assert config.log_level == "DEBUG"


def test_blank_language_list_uses_default(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ALLOWED_LANGUAGES", " , ")

    assert AppConfig.load_from_env().allowed_languages == DEFAULT_ALLOWED_LANGUAGES


@pytest.mark.parametrize(
    "kwargs",
    [
        {"service_base_url": "ftp://example.com"},
        {"service_base_url": "emkc.org/api/v2/piston"},
        {"request_timeout_s": 0},
        {"request_timeout_s": -1.0},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        AppConfig(**kwargs)


def test_non_numeric_timeout_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PISTON_TIMEOUT_S", "soon")

    with pytest.raises(ValueError):
        AppConfig.load_from_env()
