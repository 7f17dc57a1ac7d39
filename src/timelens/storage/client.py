"""MongoDB storage client for Timelens.

Provides connection management, retry logic, and repository access.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from timelens.config import StorageConfig

if TYPE_CHECKING:
    from .repositories import CategoryRepository, GoalRepository, TimeEntryRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENTRIES_COLLECTION = "time_entries"
GOALS_COLLECTION = "goals"
CATEGORIES_COLLECTION = "categories"


def retry_on_connection_failure(
    max_retries: int = 5,
    base_delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for exponential backoff retry on connection failures.

    Args:
        max_retries: Maximum number of attempts.
        base_delay: Base delay in seconds (doubles each retry).

    Returns:
        Decorated function with retry logic.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return func(*args, **kwargs)
                except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            "Connection failed in %s (attempt %d/%d), retrying in %.1fs: %s",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            delay,
                            str(e),
                        )
                        time.sleep(delay)
                    else:
                        logger.error(
                            "Connection failed in %s after %d attempts: %s",
                            func.__name__,
                            max_retries,
                            str(e),
                        )

            if last_exception:
                raise last_exception
            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator


class MongoStorageClient:
    """High-level MongoDB storage client.

    Manages the connection and hands out the entry, goal and category
    repositories.
    """

    def __init__(self, config: StorageConfig | None = None) -> None:
        """Initialize the storage client.

        Args:
            config: Connection settings. Defaults to a local server.
        """
        self._config = config or StorageConfig()
        self._client: MongoClient[dict[str, Any]] | None = None
        self._db: Database[dict[str, Any]] | None = None
        self._entries: TimeEntryRepository | None = None
        self._goals: GoalRepository | None = None
        self._categories: CategoryRepository | None = None
        self._connected = False

    @property
    def config(self) -> StorageConfig:
        return self._config

    def connect(self) -> None:
        """Connect to MongoDB and build the repositories.

        Raises:
            ConnectionFailure: If the server cannot be reached.
        """
        if self._connected:
            return

        from .repositories import CategoryRepository, GoalRepository, TimeEntryRepository

        cfg = self._config
        try:
            self._client = MongoClient(
                cfg.uri,
                maxPoolSize=cfg.max_pool_size,
                minPoolSize=cfg.min_pool_size,
                connectTimeoutMS=cfg.connect_timeout_ms,
                serverSelectionTimeoutMS=cfg.server_selection_timeout_ms,
                tz_aware=True,
            )

            # Verify connection
            self._client.admin.command("ping")

            self._db = self._client[cfg.database]
            retry = retry_on_connection_failure(cfg.max_retries, cfg.retry_base_delay)
            self._entries = TimeEntryRepository(self._db[ENTRIES_COLLECTION], retry)
            self._goals = GoalRepository(self._db[GOALS_COLLECTION], retry)
            self._categories = CategoryRepository(self._db[CATEGORIES_COLLECTION], retry)
            self._connected = True

            logger.info("Connected to MongoDB database %s", cfg.database)

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            self._connected = False
            raise

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            self._entries = None
            self._goals = None
            self._categories = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        """Check if connected to MongoDB.

        Returns:
            True if the server answers a ping, False otherwise.
        """
        if not self._connected or self._client is None:
            return False

        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError:
            self._connected = False
            return False

    @property
    def entries(self) -> "TimeEntryRepository":
        """The TimeEntryRepository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._entries is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._entries

    @property
    def goals(self) -> "GoalRepository":
        """The GoalRepository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._goals is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._goals

    @property
    def categories(self) -> "CategoryRepository":
        """The CategoryRepository.

        Raises:
            RuntimeError: If not connected.
        """
        if self._categories is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._categories

    def __enter__(self) -> "MongoStorageClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "CATEGORIES_COLLECTION",
    "ENTRIES_COLLECTION",
    "GOALS_COLLECTION",
    "MongoStorageClient",
    "retry_on_connection_failure",
]
