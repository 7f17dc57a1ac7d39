"""Read repositories for time entries, goals and categories.

All queries exclude soft-deleted documents. Every read goes through the
client's retry decorator.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

from timelens.records.models import Category, DateRange, Goal, TimeEntry

from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)

NOT_DELETED: dict[str, Any] = {"deleted": {"$ne": True}}

Retry = Callable[[Callable[..., Any]], Callable[..., Any]]


class _Repository:
    """Shared collection handling."""

    def __init__(self, collection: Collection[dict[str, Any]], retry: Retry | None = None) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection to read from.
            retry: Retry decorator; defaults to retry_on_connection_failure().
        """
        self._collection = collection
        self._retry = retry or retry_on_connection_failure()
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""

    def _find(
        self, query: dict[str, Any], sort: list[tuple[str, int]] | None = None
    ) -> list[dict[str, Any]]:
        def run() -> list[dict[str, Any]]:
            cursor = self._collection.find(query)
            if sort:
                cursor = cursor.sort(sort)
            return list(cursor)

        return self._retry(run)()


class TimeEntryRepository(_Repository):
    """Repository for time entries."""

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("start_time", DESCENDING)])
        self._collection.create_index([("goal_id", ASCENDING), ("start_time", DESCENDING)])
        self._collection.create_index([("category_id", ASCENDING), ("start_time", DESCENDING)])

    def find(
        self,
        date_range: DateRange | None = None,
        goal_ids: Iterable[str] | None = None,
        category_ids: Iterable[str] | None = None,
    ) -> list[TimeEntry]:
        """Load non-deleted entries, optionally filtered.

        Args:
            date_range: Keep entries whose start time falls inside the range.
            goal_ids: Keep entries linked to one of these goals.
            category_ids: Keep entries in one of these categories.

        Returns:
            Entries ordered by start time, oldest first.
        """
        query: dict[str, Any] = dict(NOT_DELETED)
        if date_range is not None:
            query["start_time"] = {"$gte": date_range.start, "$lte": date_range.end}
        if goal_ids is not None:
            query["goal_id"] = {"$in": list(goal_ids)}
        if category_ids is not None:
            query["category_id"] = {"$in": list(category_ids)}

        docs = self._find(query, [("start_time", ASCENDING)])
        logger.debug("Loaded %d time entries", len(docs))
        return [TimeEntry.from_dict(doc) for doc in docs]


class GoalRepository(_Repository):
    """Repository for goals."""

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("date", DESCENDING)])

    def find_active(self) -> list[Goal]:
        """Load all non-deleted goals, regardless of date."""
        docs = self._find(dict(NOT_DELETED), [("date", ASCENDING)])
        return [Goal.from_dict(doc) for doc in docs]


class CategoryRepository(_Repository):
    """Repository for categories."""

    def find_all(self) -> list[Category]:
        """Load categories in display order."""
        docs = self._find(dict(NOT_DELETED), [("order", ASCENDING)])
        return [Category.from_dict(doc) for doc in docs]


__all__ = ["CategoryRepository", "GoalRepository", "TimeEntryRepository"]
