"""Data models for tracked time.

Defines the read-only records owned by storage (TimeEntry, Goal, Category),
the DateRange filter, and ProcessedEntry, the joined view used by the
aggregators.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any

from timelens.clock import as_aware, local_date


def _ensure_aware(value: datetime | None) -> datetime | None:
    # MongoDB returns naive datetimes in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass
class TimeEntry:
    """A tracked stretch of time.

    Attributes:
        id: Storage document ID
        start_time: When the activity started
        end_time: When it ended (None while in progress)
        activity: Free-text description
        category_id: Linked category (optional)
        goal_id: Linked goal (optional)
        deleted: Soft-delete flag
    """

    id: str
    start_time: datetime
    end_time: datetime | None = None
    activity: str = ""
    category_id: str | None = None
    goal_id: str | None = None
    deleted: bool = False

    @property
    def is_eligible(self) -> bool:
        """True when the entry is finished and not deleted."""
        return self.end_time is not None and not self.deleted

    @property
    def duration_minutes(self) -> float:
        """Raw span in minutes; negative on clock skew, 0 while in progress."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() / 60

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "activity": self.activity,
            "category_id": self.category_id,
            "goal_id": self.goal_id,
            "deleted": self.deleted,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeEntry":
        """Create from MongoDB document."""
        start_time = _ensure_aware(data.get("start_time")) or datetime.now(UTC)
        return cls(
            id=str(data.get("_id", data.get("id", ""))),
            start_time=start_time,
            end_time=_ensure_aware(data.get("end_time")),
            activity=data.get("activity", "") or "",
            category_id=data.get("category_id"),
            goal_id=data.get("goal_id"),
            deleted=bool(data.get("deleted", False)),
        )


@dataclass
class Goal:
    """A user-declared goal for a given day."""

    id: str
    name: str
    date: str = ""  # YYYY-MM-DD
    deleted: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {"name": self.name, "date": self.date, "deleted": self.deleted}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Goal":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", data.get("id", ""))),
            name=data.get("name", "") or "",
            date=data.get("date", "") or "",
            deleted=bool(data.get("deleted", False)),
        )


@dataclass
class Category:
    """Activity category. Color comes from configuration, not storage."""

    id: str
    name: str
    order: int = 999

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {"_id": self.id, "name": self.name, "order": self.order}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Category":
        """Create from MongoDB document."""
        return cls(
            id=str(data.get("_id", data.get("id", ""))),
            name=data.get("name", "") or "",
            order=int(data.get("order", 999)),
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive analysis window.

    Naive bounds and instants are read as system local time.
    """

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return as_aware(self.start) <= as_aware(instant) <= as_aware(self.end)

    def days(self, tz: tzinfo | None = None) -> list[date]:
        """Calendar dates from the start's date through the end's date."""
        current = local_date(self.start, tz)
        last = local_date(self.end, tz)
        result: list[date] = []
        while current <= last:
            result.append(current)
            current += timedelta(days=1)
        return result

    @classmethod
    def for_dates(
        cls, first: date, last: date, tz: tzinfo | None = None
    ) -> "DateRange":
        """Range covering whole calendar days ``first`` through ``last``.

        Without ``tz`` the bounds are midnights in the system zone.
        """
        if tz is None:
            return cls(
                start=datetime.combine(first, time.min).astimezone(),
                end=datetime.combine(last, time.max).astimezone(),
            )
        return cls(
            start=datetime.combine(first, time.min, tzinfo=tz),
            end=datetime.combine(last, time.max, tzinfo=tz),
        )

    @classmethod
    def last_days(cls, days: int, now: datetime, tz: tzinfo | None = None) -> "DateRange":
        """Default dashboard window: ``days`` back through the end of today."""
        today = local_date(now, tz)
        return cls.for_dates(today - timedelta(days=days), today, tz)

    @classmethod
    def goal_analysis_default(
        cls, now: datetime, days: int = 30, tz: tzinfo | None = None
    ) -> "DateRange":
        """Goal dashboard window: ``days`` back through the end of yesterday."""
        today = local_date(now, tz)
        return cls.for_dates(today - timedelta(days=days), today - timedelta(days=1), tz)


@dataclass
class ProcessedEntry:
    """A finished entry joined with its category and goal names."""

    id: str
    start_time: datetime
    end_time: datetime
    duration: int  # minutes
    activity: str
    category_id: str | None
    category_name: str
    goal_id: str | None
    goal_name: str
    date: date
    hour: int
    weekday: int  # Monday = 0


__all__ = ["Category", "DateRange", "Goal", "ProcessedEntry", "TimeEntry"]
