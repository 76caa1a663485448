"""Unit tests for engine config parsing."""

from __future__ import annotations

import base64
import json

import pytest

from shared.config import DEFAULT_EVENT_IDS, EngineConfig
from shared.errors import ConfigurationError

ENV_VARS = (
    "EVENTBRITE_TOKEN",
    "EVENTBRITE_EVENT_IDS",
    "EVENTBRITE_API_URL",
    "GOOGLE_SHEETS_ID",
    "GOOGLE_SERVICE_ACCOUNT",
    "GOOGLE_SHEETS_RANGE",
    "CACHE_DURATION_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults_without_environment() -> None:
    """Config should fall back to the fixed event list and a 300s cache."""
    config = EngineConfig.from_env()

    assert config.event_ids == DEFAULT_EVENT_IDS
    assert config.cache_duration == 300
    assert config.token_configured is False
    assert config.sheets_configured is False


def test_require_token_raises_when_missing() -> None:
    """A missing token is reported when the engine asks for it."""
    config = EngineConfig.from_env()

    with pytest.raises(ConfigurationError):
        config.require_token()


def test_from_env_parses_event_ids_and_durations(monkeypatch: pytest.MonkeyPatch) -> None:
    """Comma-separated ids are trimmed and numeric values parsed."""
    monkeypatch.setenv("EVENTBRITE_TOKEN", "secret")
    monkeypatch.setenv("EVENTBRITE_EVENT_IDS", " 111, 222 ,,")
    monkeypatch.setenv("CACHE_DURATION_SECONDS", "60")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "2.5")

    config = EngineConfig.from_env()

    assert config.require_token() == "secret"
    assert config.event_ids == ("111", "222")
    assert config.cache_duration == 60
    assert config.http_timeout == 2.5


def test_from_env_raises_for_invalid_cache_duration(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-numeric cache duration is a configuration error."""
    monkeypatch.setenv("CACHE_DURATION_SECONDS", "five minutes")

    with pytest.raises(ConfigurationError):
        EngineConfig.from_env()


def test_from_env_decodes_service_account(monkeypatch: pytest.MonkeyPatch) -> None:
    """Base64 service-account JSON enables the sheets source."""
    account = {"type": "service_account", "client_email": "bot@example.iam.gserviceaccount.com"}
    monkeypatch.setenv("GOOGLE_SHEETS_ID", "sheet-1")
    monkeypatch.setenv(
        "GOOGLE_SERVICE_ACCOUNT", base64.b64encode(json.dumps(account).encode()).decode()
    )

    config = EngineConfig.from_env()

    assert config.service_account == account
    assert config.sheets_configured is True


def test_from_env_raises_for_undecodable_service_account(monkeypatch: pytest.MonkeyPatch) -> None:
    """Garbage in GOOGLE_SERVICE_ACCOUNT is rejected."""
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT", "not base64 json!")

    with pytest.raises(ConfigurationError):
        EngineConfig.from_env()


def test_sheets_disabled_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """A sheet id alone does not enable the secondary source."""
    monkeypatch.setenv("GOOGLE_SHEETS_ID", "sheet-1")

    assert EngineConfig.from_env().sheets_configured is False
