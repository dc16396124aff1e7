"""Runtime settings for SEC Filing Watcher.

Values come from environment variables prefixed with ``SEC_WATCH_``
(e.g. ``SEC_WATCH_USER_AGENT``). The recipient, sender and sender
credential are not settings; they are passed on the command line.
"""

import re
from datetime import time
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONTACT_RE = re.compile(r"[^\s@()<>]+@[^\s@()<>]+\.[A-Za-z]{2,}")


class WatcherSettings(BaseSettings):
    """Configuration for the registry client, poll window and SMTP transport."""

    user_agent: str = Field(
        description="Identification header required by SEC EDGAR, e.g. 'my-alerts (me@mydomain.com)'.",
    )
    www_base_url: str = "https://www.sec.gov"
    data_base_url: str = "https://data.sec.gov"
    archive_base_url: str = "https://www.sec.gov/Archives/edgar/data"

    timeout_s: float = Field(10.0, gt=0)
    requests_per_second: float = Field(10.0, gt=0, description="SEC fair-access ceiling.")
    max_retries: int = Field(3, ge=0)
    backoff_base_s: float = Field(0.5, ge=0)
    backoff_cap_s: float = Field(8.0, ge=0)

    timezone: str = "America/New_York"
    window_open: time = time(6, 0)
    window_close: time = time(22, 0)
    pass_interval_s: float = Field(1.0, ge=0)

    watchlist_dir: Path = Path(".")
    watchlist_pattern: str = "*.csv"

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    log_level: str | None = None  # falls back to LOG_LEVEL, then INFO

    model_config = SettingsConfigDict(env_prefix="SEC_WATCH_", extra="ignore")

    @field_validator("user_agent")
    @classmethod
    def require_contact(cls, value: str) -> str:
        """SEC rejects requests whose User-Agent has no contact address."""
        value = value.strip()
        if not CONTACT_RE.search(value):
            raise ValueError("user_agent must name the tool and a contact email address")
        if value.lower().rstrip(")").endswith("@example.com"):
            raise ValueError("user_agent still uses a placeholder example.com contact")
        return value
