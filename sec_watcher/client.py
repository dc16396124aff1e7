"""SEC EDGAR client: paced, retrying JSON fetches and ticker resolution."""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import httpx

from sec_watcher.errors import RegistryError
from sec_watcher.models import Company
from sec_watcher.rate_limiter import RateLimiter
from sec_watcher.settings import WatcherSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def normalize_cik(cik: str | int) -> str:
    """
    Zero-pad a numeric CIK to 10 digits.

    Args:
        cik: CIK as returned by the directory (int or numeric string)

    Returns:
        10-character CIK string

    Raises:
        ValueError: If the value is not purely numeric or longer than 10 digits
    """
    digits = str(cik).strip()
    if not digits.isdigit() or len(digits) > 10:
        raise ValueError(f"Invalid CIK: {cik!r}")
    return digits.zfill(10)


class SECClient:
    """Client for the SEC EDGAR ticker directory and submissions endpoints."""

    def __init__(
        self,
        settings: WatcherSettings,
        http: httpx.Client | None = None,
        limiter: RateLimiter | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize with settings and optional collaborators.

        Args:
            settings: Base URLs, identification header, timeout and retry budget
            http: Shared httpx client (default: one owned by this instance)
            limiter: Request pacer (default: built from settings.requests_per_second)
            sleep: Sleep function used for retry backoff (default: the limiter's
                interruptible sleep, so a closed limiter cancels the backoff)
        """
        self._settings = settings
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=settings.timeout_s, follow_redirects=True)
        self.limiter = limiter or RateLimiter(settings.requests_per_second)
        self._sleep = sleep or self.limiter.sleep
        self._headers = {
            "User-Agent": settings.user_agent,
            "Accept-Encoding": "gzip, deflate",
        }

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SECClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_company_directory(self) -> Mapping[str, Any]:
        """Fetch the full ticker directory (company_tickers.json)."""
        url = f"{self._settings.www_base_url.rstrip('/')}/files/company_tickers.json"
        return self._get_json(url)

    def fetch_submissions(self, cik: str) -> Mapping[str, Any]:
        """Fetch the submissions document for a 10-digit CIK."""
        url = f"{self._settings.data_base_url.rstrip('/')}/submissions/CIK{normalize_cik(cik)}.json"
        return self._get_json(url)

    def resolve_tickers(self, tickers: Iterable[str], directory: Mapping[str, Any] | None = None) -> list[Company]:
        """
        Map watch-list tickers to registrants.

        Matching is exact and case-sensitive. Tickers missing from the
        directory are dropped with a warning. Several tickers of the same
        registrant yield a single Company (the first ticker in sorted order).

        Args:
            tickers: Watch-list symbols
            directory: Directory payload; fetched from EDGAR when omitted

        Returns:
            Companies ordered by ticker, one per distinct CIK

        Raises:
            RegistryError: If the directory cannot be fetched or is malformed
        """
        if directory is None:
            directory = self.fetch_company_directory()

        by_ticker: dict[str, dict] = {}
        for entry in directory.values():
            if isinstance(entry, dict) and "ticker" in entry:
                by_ticker.setdefault(entry["ticker"], entry)

        companies: list[Company] = []
        seen_ciks: set[str] = set()
        unmatched: list[str] = []

        unique = sorted(set(tickers))
        for ticker in unique:
            entry = by_ticker.get(ticker)
            if entry is None:
                unmatched.append(ticker)
                continue

            try:
                cik = normalize_cik(entry["cik_str"])
            except (KeyError, ValueError) as e:
                raise RegistryError(f"Malformed directory entry for {ticker}: {e}") from e

            if cik in seen_ciks:
                continue
            seen_ciks.add(cik)
            companies.append(Company(ticker=ticker, cik=cik, name=entry.get("title", "")))

        if unmatched:
            logger.warning("Tickers not found in SEC directory: %s", ", ".join(unmatched))
        logger.info("Resolved %d registrant(s) from %d ticker(s)", len(companies), len(unique))

        return companies

    def _get_json(self, url: str) -> Mapping[str, Any]:
        """
        GET a JSON object, pacing every attempt and retrying transient failures.

        Transport errors and 429/5xx responses are retried with capped
        exponential backoff (a numeric Retry-After header wins). Other
        error statuses fail immediately.

        Raises:
            RegistryError: On non-retryable status, exhausted retries, or non-JSON payload
            WatchCancelled: If the rate limiter is closed while waiting
        """
        settings = self._settings
        attempt = 0

        while True:
            self.limiter.wait()
            logger.debug("GET %s (attempt %d)", url, attempt + 1)

            try:
                response = self._http.get(url, headers=self._headers, timeout=settings.timeout_s)
            except httpx.TransportError as e:
                if attempt >= settings.max_retries:
                    raise RegistryError(f"Request to {url} failed: {e}", url=url) from e
                delay = self._backoff(attempt)
                logger.warning("Transport error for %s (%s); retrying in %.2fs", url, e, delay)
            else:
                status = response.status_code
                if status < 400:
                    return self._decode(response, url)
                if status not in RETRYABLE_STATUS:
                    raise RegistryError(f"SEC returned HTTP {status} for {url}", url=url, status_code=status)
                if attempt >= settings.max_retries:
                    raise RegistryError(
                        f"SEC returned HTTP {status} repeatedly for {url}", url=url, status_code=status
                    )
                delay = self._retry_after(response) or self._backoff(attempt)
                logger.warning("HTTP %d for %s; retrying in %.2fs", status, url, delay)

            self._sleep(delay)
            attempt += 1

    def _backoff(self, attempt: int) -> float:
        return min(self._settings.backoff_cap_s, self._settings.backoff_base_s * (2**attempt))

    def _retry_after(self, response: httpx.Response) -> float | None:
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            return min(self._settings.backoff_cap_s, max(0.0, float(value)))
        except ValueError:
            return None

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Mapping[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryError(f"Invalid JSON from {url}", url=url, status_code=response.status_code) from e
        if not isinstance(payload, dict):
            raise RegistryError(f"Expected a JSON object from {url}", url=url, status_code=response.status_code)
        return payload
