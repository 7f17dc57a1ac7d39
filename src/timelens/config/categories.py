"""Category display order and color lookup.

Colors and ordering are configuration, never stored with the records.
Lookups for unknown ids fall back to defaults instead of raising.
"""

from . import CategoryConfig, default_categories

DEFAULT_ORDER = 999
DEFAULT_COLOR = "#999999"
UNSET_COLOR = "#d9d9d9"
UNCATEGORIZED_COLOR = "#e0e0e0"


class CategoryRegistry:
    """Resolves category display settings by id."""

    def __init__(self, categories: dict[str, CategoryConfig] | None = None) -> None:
        """Initialize registry.

        Args:
            categories: Category settings keyed by id. Defaults to the presets.
        """
        self._categories = categories if categories is not None else default_categories()

    def get(self, category_id: str | None) -> CategoryConfig | None:
        if not category_id:
            return None
        return self._categories.get(category_id)

    def order_of(self, category_id: str | None) -> int:
        config = self.get(category_id)
        return config.order if config else DEFAULT_ORDER

    def color_of(self, category_id: str | None, default: str = UNSET_COLOR) -> str:
        if not category_id:
            return default
        config = self.get(category_id)
        return config.color if config else default

    def name_of(self, category_id: str | None) -> str | None:
        config = self.get(category_id)
        return config.name if config else None

    def all(self) -> list[CategoryConfig]:
        """All configured categories in display order."""
        return sorted(self._categories.values(), key=lambda c: c.order)


__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_ORDER",
    "UNCATEGORIZED_COLOR",
    "UNSET_COLOR",
    "CategoryRegistry",
]
