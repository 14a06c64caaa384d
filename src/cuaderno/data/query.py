"""Read-only views over a dataset: flattening, ordering and search."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import Category, Dataset, FlatItem


@dataclass(frozen=True)
class Overview:
    """Summary shown on the landing page."""

    total_items: int
    total_categories: int
    latest: list[FlatItem] = field(default_factory=list)

    @property
    def title(self) -> str:
        items = "dato" if self.total_items == 1 else "datos"
        categories = "categoría" if self.total_categories == 1 else "categorías"
        return (
            f"📌 Resumen — {self.total_items} {items} "
            f"en {self.total_categories} {categories}"
        )


def sort_by_recency(items: Iterable[FlatItem]) -> list[FlatItem]:
    """Newest first by updatedAt (createdAt when missing).

    Plain string comparison: ISO-8601 timestamps sort lexically in time
    order. The sort is stable, so ties keep their traversal order.
    """
    return sorted(items, key=lambda it: it.effective_timestamp, reverse=True)


def flatten_category(category: Category) -> list[FlatItem]:
    return sort_by_recency(FlatItem.from_item(item, category) for item in category.items)


def flatten(dataset: Dataset) -> list[FlatItem]:
    """Every item of every category, tagged with its category, newest first."""
    return sort_by_recency(
        FlatItem.from_item(item, category)
        for category in dataset.categories
        for item in category.items
    )


def search_filter(items: list[FlatItem], query: str | None) -> list[FlatItem]:
    """Case-insensitive substring search over category name, key, value and note.

    A blank query returns the items unchanged.
    """
    q = (query or "").strip().lower()
    if not q:
        return items
    return [it for it in items if q in it.haystack.lower()]


def overview(dataset: Dataset, limit: int = 10) -> Overview:
    items = flatten(dataset)
    return Overview(
        total_items=len(items),
        total_categories=len(dataset.categories),
        latest=items[:limit],
    )
