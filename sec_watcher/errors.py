"""Exception types for SEC Filing Watcher."""


class WatcherError(Exception):
    """Base class for all watcher errors."""


class ConfigurationError(WatcherError):
    """Invalid local configuration. Fatal, never retried."""


class WatchlistError(ConfigurationError):
    """The watch-list file set is unusable (e.g. more than one file)."""


class RegistryError(WatcherError):
    """A request to SEC EDGAR failed or returned an unusable payload."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NotificationError(WatcherError):
    """An alert could not be delivered."""


class WatchCancelled(WatcherError):
    """The session was stopped before the window closed."""
