"""The bounded daily watch session."""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime

from sec_watcher.client import SECClient
from sec_watcher.dedup import DedupStore
from sec_watcher.errors import WatchCancelled
from sec_watcher.models import Company, RunSummary
from sec_watcher.notifier import Notifier
from sec_watcher.poller import FilingPoller
from sec_watcher.settings import WatcherSettings
from sec_watcher.window import PollWindow, resolve_timezone

logger = logging.getLogger(__name__)


class WatchSession:
    """Resolve the watch list once, then poll EDGAR while the window is open.

    All run state lives on the instance: the registrants, the dedup store,
    the window and the rate limiter (through the client).
    """

    def __init__(
        self,
        settings: WatcherSettings,
        client: SECClient,
        notifier: Notifier,
        tickers: Iterable[str],
        clock: Callable[[], datetime] | None = None,
        dedup: DedupStore | None = None,
    ) -> None:
        """
        Set up a session anchored to the current date.

        Args:
            settings: Window bounds, timezone, pause between passes, archive URL
            client: EDGAR client (also owns the rate limiter)
            notifier: Alert transport
            tickers: Watch-list symbols
            clock: Returns the current time (default: now in settings.timezone)
            dedup: Store of alerted accession numbers (default: empty)

        Raises:
            ConfigurationError: If the timezone cannot be resolved
        """
        self._settings = settings
        self._client = client
        self._notifier = notifier
        self.tickers = frozenset(tickers)

        self.zone = resolve_timezone(settings.timezone)
        self._clock = clock or (lambda: datetime.now(self.zone))
        self.window = PollWindow.starting_at(self._now(), settings.window_open, settings.window_close)
        self.today = self.window.opens_at.date()

        self.poller = FilingPoller(client, settings.archive_base_url)
        self.dedup = dedup if dedup is not None else DedupStore()
        self.registrants: tuple[Company, ...] | None = None
        self.summary = RunSummary()
        self._stopped = threading.Event()

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=self.zone)
        return now.astimezone(self.zone)

    def start(self) -> tuple[Company, ...]:
        """Resolve tickers to registrants. Runs once per session."""
        if self.registrants is None:
            self.registrants = tuple(self._client.resolve_tickers(self.tickers))
            self.summary.registrants = len(self.registrants)
        return self.registrants

    def run_pass(self) -> int:
        """
        Check every registrant once and alert on unseen filings.

        Returns:
            Number of alerts sent in this pass

        Raises:
            RegistryError: If a submissions fetch fails after retries
            NotificationError: If an alert cannot be delivered
            WatchCancelled: If the session was stopped
        """
        alerts = 0
        for company in self.start():
            if self._stopped.is_set():
                raise WatchCancelled("session stopped")

            for record in self.poller.poll(company, self.today):
                if record.accession_number in self.dedup:
                    continue
                self._notifier.notify(record)
                self.dedup.add(record.accession_number)
                alerts += 1

        self.summary.passes += 1
        self.summary.alerts += alerts
        return alerts

    def run(self) -> RunSummary:
        """
        Poll until the window closes.

        Returns:
            Counters for the whole session

        Raises:
            RegistryError: If EDGAR fails after retries
            NotificationError: If an alert cannot be delivered
            WatchCancelled: If the session was stopped
        """
        self.start()
        logger.info(
            "Watching %d registrant(s) from %s to %s",
            len(self.registrants),
            self.window.opens_at.isoformat(),
            self.window.closes_at.isoformat(),
        )

        while self.window.is_open(self._now()):
            alerts = self.run_pass()
            if alerts:
                logger.info("Pass %d sent %d alert(s)", self.summary.passes, alerts)
            if self._stopped.wait(self._settings.pass_interval_s):
                raise WatchCancelled("session stopped")

        logger.info(
            "Window closed after %d pass(es); %d alert(s) sent",
            self.summary.passes,
            self.summary.alerts,
        )
        return self.summary

    def stop(self) -> None:
        """Ask a running session to stop at the next opportunity."""
        self._stopped.set()
        self._client.limiter.close()
