"""Request pacing for the SEC EDGAR fair-access ceiling."""

import threading
import time
from collections.abc import Callable

from sec_watcher.errors import WatchCancelled


class RateLimiter:
    """Enforce a minimum spacing between outbound requests.

    With ``requests_per_second=10`` consecutive calls to :meth:`wait` return
    at least 100 ms apart. There is no burst allowance.
    """

    def __init__(
        self,
        requests_per_second: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.spacing = 1.0 / requests_per_second
        self._clock = clock
        self._next = 0.0
        self._closed = threading.Event()

    def wait(self) -> None:
        """
        Block until the next request may be sent.

        Raises:
            WatchCancelled: If the limiter was closed before or during the wait
        """
        if self._closed.is_set():
            raise WatchCancelled("rate limiter closed")

        delay = self._next - self._clock()
        if delay > 0 and self._closed.wait(delay):
            raise WatchCancelled("rate limiter closed")

        self._next = self._clock() + self.spacing

    def sleep(self, seconds: float) -> None:
        """
        Pause for ``seconds`` unless the limiter is closed first.

        Raises:
            WatchCancelled: If the limiter was closed before or during the pause
        """
        if self._closed.wait(max(0.0, seconds)):
            raise WatchCancelled("rate limiter closed")

    def close(self) -> None:
        """Wake any waiter and reject further requests."""
        self._closed.set()
