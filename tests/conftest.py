"""Shared fixtures for Timelens tests."""

import time
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest

from timelens.clock import FixedClock
from timelens.records.models import Category, Goal, TimeEntry

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


def make_entry(
    entry_id: str,
    start: datetime,
    minutes: float = 60,
    *,
    activity: str = "",
    goal_id: str | None = None,
    category_id: str | None = None,
    deleted: bool = False,
    finished: bool = True,
) -> TimeEntry:
    """Build a time entry lasting ``minutes`` from ``start``."""
    return TimeEntry(
        id=entry_id,
        start_time=start,
        end_time=start + timedelta(minutes=minutes) if finished else None,
        activity=activity,
        category_id=category_id,
        goal_id=goal_id,
        deleted=deleted,
    )


def at(day: int, hour: int = 9, month: int = 3) -> datetime:
    """A UTC instant in 2024."""
    return datetime(2024, month, day, hour, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def utc_system_zone(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with the process timezone set to UTC."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def shanghai_system_zone(monkeypatch: pytest.MonkeyPatch) -> None:
    """Switch the process timezone to Asia/Shanghai (UTC+8) for one test."""
    monkeypatch.setenv("TZ", "Asia/Shanghai")
    time.tzset()


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-03-20 12:00 UTC."""
    return FixedClock(NOW)


@pytest.fixture
def thesis_goals() -> list[Goal]:
    """Two thesis goals and one unrelated fitness goal."""
    return [
        Goal(id="g1", name="写论文", date="2024-03-01"),
        Goal(id="g2", name="写论文第三章", date="2024-03-02"),
        Goal(id="g3", name="健身", date="2024-03-02"),
    ]


@pytest.fixture
def categories() -> list[Category]:
    """Stored categories matching the preset ids."""
    return [
        Category(id="work", name="Work", order=2),
        Category(id="study", name="Study", order=1),
        Category(id="exercise", name="Exercise", order=4),
    ]
