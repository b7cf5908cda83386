"""
Clock capability.

Every computation pass reads "now" exactly once from a Clock and reuses
that instant for all cheques and stages in the pass.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, Union

from dateutil import tz

from chequeflow.config import settings


class Clock(Protocol):
    """Supplies the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in a configured timezone."""

    def __init__(self, timezone: Optional[str] = None):
        name = timezone or settings.TIMEZONE
        zone = tz.gettz(name)
        if zone is None:
            raise ValueError(f"Unknown timezone: {name}")
        self.timezone = zone

    def now(self) -> datetime:
        return datetime.now(self.timezone)


@dataclass(frozen=True)
class FixedClock:
    """Clock pinned to a single instant."""
    instant: datetime

    def now(self) -> datetime:
        return self.instant


def as_of_date(now: Union[datetime, date]) -> date:
    """Calendar day of an instant, in the instant's own timezone."""
    if isinstance(now, datetime):
        return now.date()
    return now


def get_clock() -> Clock:
    """FastAPI dependency for the wall clock."""
    return SystemClock()
