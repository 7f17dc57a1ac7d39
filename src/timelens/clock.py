"""Clock abstraction and local-calendar helpers.

All "now" and "today" questions in the analysis engine go through a Clock so
that health status and future-bucket checks are deterministic under test.
"""

from datetime import UTC, date, datetime, tzinfo
from typing import Protocol


class Clock(Protocol):
    """Protocol for the current-instant source."""

    def now(self) -> datetime:
        """Return the current instant."""
        ...


class SystemClock:
    """Wall clock, optionally pinned to a timezone."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now(UTC).astimezone()
        return datetime.now(self._tz)


class FixedClock:
    """Clock frozen at a single instant (tests, replays)."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance_to(self, instant: datetime) -> None:
        """Move the frozen instant."""
        self._instant = instant


def as_aware(instant: datetime) -> datetime:
    """Attach the system zone to a naive datetime; aware ones pass through."""
    if instant.tzinfo is None:
        return instant.astimezone()
    return instant


def local_date(instant: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of an instant in the analysis timezone.

    Aware datetimes are converted to ``tz``, or to the system zone when no
    timezone is given; naive datetimes are taken as already local.

    Args:
        instant: Point in time
        tz: Analysis timezone, or None for the system zone

    Returns:
        The local calendar date
    """
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(tz).date()


def local_hour(instant: datetime, tz: tzinfo | None = None) -> int:
    """Hour of day (0-23) of an instant in the analysis timezone."""
    if instant.tzinfo is None:
        return instant.hour
    return instant.astimezone(tz).hour


__all__ = ["Clock", "FixedClock", "SystemClock", "as_aware", "local_date", "local_hour"]
