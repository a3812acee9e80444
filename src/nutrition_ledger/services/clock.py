"""Clock capability used for calendar-day comparisons."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current timezone-aware instant."""


@dataclass
class SystemClock(Clock):
    """Wall clock in a fixed IANA timezone."""

    timezone_name: str = "UTC"

    def now(self) -> datetime:
        """Return the current time in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone_name))


def is_same_day(instant: datetime, now: datetime) -> bool:
    """Return True when both instants share a local calendar date in now's zone."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=now.tzinfo)
    if now.tzinfo is not None:
        instant = instant.astimezone(now.tzinfo)
    return instant.date() == now.date()
