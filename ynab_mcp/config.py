"""Environment configuration for the YNAB MCP server."""

import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.ynab.com/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    token: str
    budget_id: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timezone: Optional[tzinfo] = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` plus ``.env``)."""
        if environ is None:
            load_dotenv(override=False)
            environ = os.environ

        token = (environ.get("YNAB_API_TOKEN") or "").strip()
        if not token:
            raise ConfigurationError("YNAB_API_TOKEN environment variable is required")

        timezone = None
        tz_name = (environ.get("YNAB_TIMEZONE") or "").strip()
        if tz_name:
            try:
                timezone = ZoneInfo(tz_name)
            except (ZoneInfoNotFoundError, ValueError):
                raise ConfigurationError(f"YNAB_TIMEZONE is not a known timezone: {tz_name}")

        raw_timeout = (environ.get("YNAB_HTTP_TIMEOUT") or "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"YNAB_HTTP_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

        return cls(
            token=token,
            budget_id=(environ.get("YNAB_BUDGET_ID") or "").strip() or None,
            # Keep overrideable for troubleshooting against a proxy or mock.
            base_url=(environ.get("YNAB_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timezone=timezone,
            timeout=timeout,
            log_level=(environ.get("YNAB_LOG_LEVEL") or "INFO").upper(),
        )
