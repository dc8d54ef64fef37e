"""Tests for environment settings validation and the application container."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.app import create_app
from src.config.logging import QUIET_LOGGERS, configure_logging
from src.config.settings import Settings, load_settings

_REQUIRED = {
    "TELEGRAM_BOT_TOKEN": "123:abc",
    "OPENAI_API_KEY": "sk-openai",
    "ROUTER_API_URL": "https://stock.example",
    "ROUTER_API_TOKEN": "tok",
}
_OPTIONAL = ("LLM_ENABLED", "LLM_API_KEY", "TRANSCRIBE_MIN_INTERVAL_MS", "TRANSCRIBE_MAX_RETRIES", "LOG_LEVEL")


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key, value in _REQUIRED.items():
        monkeypatch.setenv(key, value)
    for key in _OPTIONAL:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(env: pytest.MonkeyPatch) -> None:
    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    assert settings.llm_enabled is False
    assert settings.transcribe_min_interval_ms == 1200
    assert settings.transcribe_min_interval_s == pytest.approx(1.2)
    assert settings.transcribe_max_retries == 3
    assert settings.effective_llm_api_key == "sk-openai"
    assert settings.log_level == "INFO"


def test_dedicated_llm_key_wins(env: pytest.MonkeyPatch) -> None:
    env.setenv("LLM_ENABLED", "true")
    env.setenv("LLM_API_KEY", "sk-llm")
    settings = Settings(_env_file=None)  # type: ignore[call-arg]
    assert settings.llm_enabled is True
    assert settings.effective_llm_api_key == "sk-llm"


def test_llm_enabled_requires_some_key(env: pytest.MonkeyPatch) -> None:
    env.setenv("LLM_ENABLED", "true")
    env.setenv("OPENAI_API_KEY", "")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_negative_pacing_is_rejected(env: pytest.MonkeyPatch) -> None:
    env.setenv("TRANSCRIBE_MIN_INTERVAL_MS", "-1")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_load_settings_wraps_validation_errors(
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    with pytest.raises(RuntimeError):
        load_settings()


def test_create_app_wires_one_gate(env: pytest.MonkeyPatch) -> None:
    env.setenv("TRANSCRIBE_MIN_INTERVAL_MS", "500")
    env.setenv("TRANSCRIBE_MAX_RETRIES", "1")
    app = create_app(Settings(_env_file=None))  # type: ignore[call-arg]

    assert app.rate_gate.min_interval_s == pytest.approx(0.5)
    assert app.rate_gate.last_granted_at is None
    assert app.retry_policy.max_retries == 1
    assert app.router_client.route_url == "https://stock.example/api/ai/route"


def test_configure_logging_quiets_sdk_loggers() -> None:
    configure_logging("debug")
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
