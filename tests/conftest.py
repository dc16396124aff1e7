"""Shared fixtures for SEC Filing Watcher tests."""

import json
from datetime import date, datetime
from pathlib import Path

import httpx
import pytest
from dateutil import tz

from sec_watcher.client import SECClient
from sec_watcher.models import Company
from sec_watcher.rate_limiter import RateLimiter
from sec_watcher.settings import WatcherSettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEST_USER_AGENT = "sec-watcher-tests (alerts@sec-watcher.dev)"


@pytest.fixture
def eastern():
    """US Eastern timezone used by the poll window."""
    return tz.gettz("America/New_York")


@pytest.fixture
def filing_day():
    """The date on which the submissions fixture has three filings."""
    return date(2024, 5, 2)


@pytest.fixture
def at(eastern, filing_day):
    """Build an Eastern-time datetime, on the filing day unless told otherwise."""

    def _at(hour, minute=0, day=None):
        day = day or filing_day
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=eastern)

    return _at


@pytest.fixture
def companies_data():
    """Load company tickers fixture."""
    with open(FIXTURES_DIR / "company_tickers.json") as f:
        return json.load(f)


@pytest.fixture
def submissions_data():
    """Load submissions fixture (3 filings on 2024-05-02, 2 earlier)."""
    with open(FIXTURES_DIR / "submissions_sample.json") as f:
        return json.load(f)


@pytest.fixture
def apple():
    """The registrant the submissions fixture belongs to."""
    return Company(ticker="AAPL", cik="0000320193", name="Apple Inc.")


@pytest.fixture
def settings(tmp_path):
    """Settings with no pauses so tests run instantly."""
    return WatcherSettings(
        user_agent=TEST_USER_AGENT,
        requests_per_second=1000.0,
        max_retries=2,
        backoff_base_s=0.0,
        backoff_cap_s=0.0,
        pass_interval_s=0.0,
        watchlist_dir=tmp_path,
    )


@pytest.fixture
def make_client(settings):
    """Build an SECClient whose HTTP calls go to ``handler``."""
    clients = []

    def _make(handler, sleep=lambda _: None, limiter=None):
        http = httpx.Client(transport=httpx.MockTransport(handler))
        client = SECClient(settings, http=http, limiter=limiter or RateLimiter(1000.0), sleep=sleep)
        clients.append(http)
        return client

    yield _make

    for http in clients:
        http.close()
