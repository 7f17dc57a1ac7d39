"""Record sources feeding the analysis engine.

The analyzer only needs three reads: entries (optionally filtered), all
goals and all categories. Deleted records never come back from a source.
"""

import logging
from collections.abc import Iterable
from typing import Protocol

from timelens.records.models import Category, DateRange, Goal, TimeEntry

from .client import MongoStorageClient

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Protocol for loading time-tracking records."""

    def load_entries(
        self,
        date_range: DateRange | None = None,
        goal_ids: Iterable[str] | None = None,
        category_ids: Iterable[str] | None = None,
    ) -> list[TimeEntry]:
        """Load non-deleted entries, optionally filtered."""
        ...

    def load_goals(self) -> list[Goal]:
        """Load all non-deleted goals."""
        ...

    def load_categories(self) -> list[Category]:
        """Load all categories."""
        ...


class MongoRecordSource:
    """Adapter for the analyzer to use MongoDB data.

    Implements the RecordSource protocol on top of MongoStorageClient,
    connecting lazily on first use.
    """

    def __init__(self, client: MongoStorageClient) -> None:
        """Initialize with a storage client.

        Args:
            client: The MongoStorageClient to read through.
        """
        self._client = client

    def _connected(self) -> MongoStorageClient:
        if not self._client.is_connected():
            self._client.connect()
        return self._client

    def load_entries(
        self,
        date_range: DateRange | None = None,
        goal_ids: Iterable[str] | None = None,
        category_ids: Iterable[str] | None = None,
    ) -> list[TimeEntry]:
        return self._connected().entries.find(date_range, goal_ids, category_ids)

    def load_goals(self) -> list[Goal]:
        return self._connected().goals.find_active()

    def load_categories(self) -> list[Category]:
        return self._connected().categories.find_all()


class InMemoryRecordSource:
    """RecordSource over plain lists, for fixtures and tests."""

    def __init__(
        self,
        entries: list[TimeEntry] | None = None,
        goals: list[Goal] | None = None,
        categories: list[Category] | None = None,
    ) -> None:
        self.entries = list(entries or [])
        self.goals = list(goals or [])
        self.categories = list(categories or [])

    def load_entries(
        self,
        date_range: DateRange | None = None,
        goal_ids: Iterable[str] | None = None,
        category_ids: Iterable[str] | None = None,
    ) -> list[TimeEntry]:
        goal_set = set(goal_ids) if goal_ids is not None else None
        category_set = set(category_ids) if category_ids is not None else None

        result = []
        for entry in self.entries:
            if entry.deleted:
                continue
            if date_range is not None and not date_range.contains(entry.start_time):
                continue
            if goal_set is not None and entry.goal_id not in goal_set:
                continue
            if category_set is not None and entry.category_id not in category_set:
                continue
            result.append(entry)
        result.sort(key=lambda e: e.start_time)
        return result

    def load_goals(self) -> list[Goal]:
        return [g for g in self.goals if not g.deleted]

    def load_categories(self) -> list[Category]:
        return sorted(self.categories, key=lambda c: c.order)


__all__ = ["InMemoryRecordSource", "MongoRecordSource", "RecordSource"]
