"""Daily active window during which the registry is polled."""

from datetime import date, datetime, time, tzinfo

from dateutil import tz
from pydantic import BaseModel, ConfigDict

from sec_watcher.errors import ConfigurationError


def resolve_timezone(name: str) -> tzinfo:
    """
    Look up a timezone by IANA name.

    Raises:
        ConfigurationError: If the name is unknown
    """
    zone = tz.gettz(name)
    if zone is None:
        raise ConfigurationError(f"Unknown timezone: {name!r}")
    return zone


class PollWindow(BaseModel):
    """Fixed opening and closing instants for one run.

    The window is anchored to the date the run started and is never moved,
    even if the process keeps running past midnight.
    """

    model_config = ConfigDict(frozen=True)

    opens_at: datetime
    closes_at: datetime

    @classmethod
    def for_date(cls, day: date, opens: time, closes: time, zone: tzinfo) -> "PollWindow":
        """Build the window for ``day`` with both bounds in ``zone``."""
        return cls(
            opens_at=datetime.combine(day, opens, tzinfo=zone),
            closes_at=datetime.combine(day, closes, tzinfo=zone),
        )

    @classmethod
    def starting_at(cls, now: datetime, opens: time, closes: time) -> "PollWindow":
        """Build the window for the calendar day of an aware ``now``."""
        if now.tzinfo is None:
            raise ValueError("now must be timezone-aware")
        return cls.for_date(now.date(), opens, closes, now.tzinfo)

    def is_open(self, now: datetime) -> bool:
        """Return True iff ``opens_at <= now <= closes_at``.

        Naive datetimes are taken to be in the window's own timezone.
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=self.opens_at.tzinfo)
        return self.opens_at <= now <= self.closes_at
