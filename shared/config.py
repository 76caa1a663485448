"""
Leaderboard Engine Configuration
All environment parsing lives here; services consume a typed EngineConfig.
"""

import base64
import binascii
import json
import os
from dataclasses import dataclass
from typing import Any, Optional

from shared.errors import ConfigurationError

# Nutcracker performances tracked by the leaderboard
DEFAULT_EVENT_IDS = (
    "1849540227609",
    "1859770326109",
    "1859794378049",
    "1859807366899",
)
DEFAULT_API_URL = "https://www.eventbriteapi.com/v3"
DEFAULT_SHEETS_RANGE = "Tickets!A:L"
DEFAULT_CACHE_DURATION = 300
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class EngineConfig:
    """
    Validated runtime configuration.

    Attributes:
        eventbrite_token: Primary source token; checked per invocation, not at startup.
        event_ids: Fixed set of event identifiers to poll.
        api_url: Eventbrite API base URL.
        sheets_id: Spreadsheet id; secondary source is disabled without it.
        service_account: Decoded service-account credentials, if configured.
        sheets_range: Cell range read from the spreadsheet.
        cache_duration: Freshness window of the cached snapshot, in seconds.
        http_timeout: Timeout applied to every upstream HTTP call, in seconds.
    """

    eventbrite_token: Optional[str] = None
    event_ids: tuple[str, ...] = DEFAULT_EVENT_IDS
    api_url: str = DEFAULT_API_URL
    sheets_id: Optional[str] = None
    service_account: Optional[dict[str, Any]] = None
    sheets_range: str = DEFAULT_SHEETS_RANGE
    cache_duration: float = DEFAULT_CACHE_DURATION
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Build config from process environment variables.

        Raises:
            ConfigurationError: If a value is present but malformed.
        """
        return cls(
            eventbrite_token=os.getenv("EVENTBRITE_TOKEN") or None,
            event_ids=_parse_event_ids(os.getenv("EVENTBRITE_EVENT_IDS")),
            api_url=os.getenv("EVENTBRITE_API_URL", DEFAULT_API_URL).rstrip("/"),
            sheets_id=os.getenv("GOOGLE_SHEETS_ID") or None,
            service_account=_decode_service_account(os.getenv("GOOGLE_SERVICE_ACCOUNT")),
            sheets_range=os.getenv("GOOGLE_SHEETS_RANGE", DEFAULT_SHEETS_RANGE),
            cache_duration=_parse_seconds(
                "CACHE_DURATION_SECONDS", os.getenv("CACHE_DURATION_SECONDS"), DEFAULT_CACHE_DURATION
            ),
            http_timeout=_parse_seconds(
                "HTTP_TIMEOUT_SECONDS", os.getenv("HTTP_TIMEOUT_SECONDS"), DEFAULT_HTTP_TIMEOUT
            ),
        )

    @property
    def token_configured(self) -> bool:
        return bool(self.eventbrite_token)

    @property
    def sheets_configured(self) -> bool:
        return bool(self.sheets_id and self.service_account)

    def require_token(self) -> str:
        """Return the primary token or raise ConfigurationError"""
        if not self.eventbrite_token:
            raise ConfigurationError(
                "EVENTBRITE_TOKEN not configured. Set EVENTBRITE_TOKEN in the environment."
            )
        return self.eventbrite_token


def _parse_event_ids(raw_value: Optional[str]) -> tuple[str, ...]:
    if not raw_value:
        return DEFAULT_EVENT_IDS
    event_ids = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not event_ids:
        raise ConfigurationError("EVENTBRITE_EVENT_IDS is set but contains no event ids")
    return event_ids


def _parse_seconds(name: str, raw_value: Optional[str], default: float) -> float:
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = float(raw_value)
    except ValueError as error:
        raise ConfigurationError(
            f"Invalid {name} value: expected a number of seconds, got '{raw_value}'"
        ) from error
    if value <= 0:
        raise ConfigurationError(f"Invalid {name} value: must be positive, got '{raw_value}'")
    return value


def _decode_service_account(raw_value: Optional[str]) -> Optional[dict[str, Any]]:
    """Decode base64-encoded service-account JSON"""
    if not raw_value:
        return None
    try:
        decoded = base64.b64decode(raw_value, validate=True).decode("utf-8")
        credentials = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ConfigurationError(
            "GOOGLE_SERVICE_ACCOUNT must be base64-encoded service-account JSON"
        ) from error
    if not isinstance(credentials, dict):
        raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT must decode to a JSON object")
    return credentials
