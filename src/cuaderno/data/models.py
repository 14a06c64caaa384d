"""Data models for the notebook."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_CATEGORY_NAME = "Sin nombre"
DEFAULT_EMOJI = "📁"
SCHEMA_VERSION = 1


@dataclass
class Item:
    """A key/value record inside a category.

    Attributes:
        id: Opaque identifier, unique across the whole dataset.
        key: Label of the record (e.g., 'Pizza favorita').
        value: Content of the record.
        note: Optional free text.
        created_at: ISO timestamp set once at creation.
        updated_at: ISO timestamp refreshed on every edit or move.
    """

    id: str
    key: str
    value: str
    note: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def effective_timestamp(self) -> str:
        """Timestamp used for recency ordering."""
        return self.updated_at or self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted document shape."""
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "note": self.note,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Category:
    """A named, emoji-tagged group of items."""

    id: str
    name: str = DEFAULT_CATEGORY_NAME
    emoji: str = DEFAULT_EMOJI
    items: list[Item] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}"

    def find_item(self, item_id: str) -> Item | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class Dataset:
    """Root document holding every category and item."""

    created_at: str
    updated_at: str
    categories: list[Category] = field(default_factory=list)
    version: int = SCHEMA_VERSION

    @property
    def item_count(self) -> int:
        return sum(len(category.items) for category in self.categories)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted document shape (also the export format)."""
        return {
            "version": self.version,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "categories": [category.to_dict() for category in self.categories],
        }


@dataclass(frozen=True)
class FlatItem:
    """An item tagged with its owning category, as shown in listings."""

    id: str
    key: str
    value: str
    note: str
    created_at: str
    updated_at: str
    category_id: str
    category_name: str
    category_emoji: str

    @classmethod
    def from_item(cls, item: Item, category: Category) -> "FlatItem":
        return cls(
            id=item.id,
            key=item.key,
            value=item.value,
            note=item.note,
            created_at=item.created_at,
            updated_at=item.updated_at,
            category_id=category.id,
            category_name=category.name,
            category_emoji=category.emoji,
        )

    @property
    def effective_timestamp(self) -> str:
        return self.updated_at or self.created_at

    @property
    def haystack(self) -> str:
        """Text matched by searches."""
        return f"{self.category_name} {self.key} {self.value} {self.note}"
