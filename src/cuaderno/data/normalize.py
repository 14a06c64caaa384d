"""Normalization of untrusted notebook documents.

Imported files and remote payloads are arbitrary JSON. The functions here
turn any input into fully-populated models without raising: missing fields
get defaults, malformed containers become empty lists, and fields that are
already present are left as they are, so normalizing twice is the same as
normalizing once.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable

from ..errors import InvalidDatasetError
from .ids import new_id, now_iso
from .models import (
    DEFAULT_CATEGORY_NAME,
    DEFAULT_EMOJI,
    SCHEMA_VERSION,
    Category,
    Dataset,
    Item,
)

logger = logging.getLogger(__name__)

INVALID_DOCUMENT_MESSAGE = "Formato inválido: 'categories' debe ser una lista"


def is_valid_document(raw: Any) -> bool:
    """Check the minimal structure: a mapping whose categories is a list."""
    return isinstance(raw, Mapping) and isinstance(raw.get("categories"), list)


def validate_document(raw: Any) -> Mapping[str, Any]:
    """Return raw unchanged if it is structurally a dataset.

    Raises:
        InvalidDatasetError: If raw is not a mapping or its categories is
            not a list.
    """
    if not is_valid_document(raw):
        raise InvalidDatasetError(INVALID_DOCUMENT_MESSAGE)
    return raw


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _text_or(value: Any, default: str) -> str:
    return _text(value) if value else default


def _mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    logger.warning("Treating non-object %s as empty: %r", what, raw)
    return {}


def _unique_id(raw_id: Any, seen: set[str] | None, id_factory: Callable[[], str], what: str) -> str:
    identifier = _text_or(raw_id, "") or id_factory()
    if seen is not None:
        if identifier in seen:
            replacement = id_factory()
            logger.warning("Duplicate %s id %s reassigned to %s", what, identifier, replacement)
            identifier = replacement
        seen.add(identifier)
    return identifier


def normalize_item(
    raw: Any,
    *,
    now: str | None = None,
    id_factory: Callable[[], str] = new_id,
    seen_ids: set[str] | None = None,
) -> Item:
    """Build an Item from a raw record.

    Args:
        raw: Untrusted record, normally a dict with camelCase keys.
        now: Timestamp used for missing createdAt/updatedAt.
        id_factory: Generator for missing or duplicate ids.
        seen_ids: Item ids already used in the dataset; updated in place.

    Returns:
        A fully-populated Item.
    """
    data = _mapping(raw, "item")
    ts = now or now_iso()
    return Item(
        id=_unique_id(data.get("id"), seen_ids, id_factory, "item"),
        key=_text(data.get("key")),
        value=_text(data.get("value")),
        note=_text(data.get("note")),
        created_at=_text_or(data.get("createdAt"), ts),
        updated_at=_text_or(data.get("updatedAt"), ts),
    )


def normalize_category(
    raw: Any,
    *,
    now: str | None = None,
    id_factory: Callable[[], str] = new_id,
    seen_ids: set[str] | None = None,
    seen_item_ids: set[str] | None = None,
) -> Category:
    """Build a Category (and its items) from a raw record."""
    data = _mapping(raw, "category")
    ts = now or now_iso()

    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raw_items = []

    items = []
    for raw_item in raw_items:
        if not isinstance(raw_item, Mapping):
            logger.warning("Dropping non-object item: %r", raw_item)
            continue
        items.append(
            normalize_item(raw_item, now=ts, id_factory=id_factory, seen_ids=seen_item_ids)
        )

    return Category(
        id=_unique_id(data.get("id"), seen_ids, id_factory, "category"),
        name=_text_or(data.get("name"), DEFAULT_CATEGORY_NAME),
        emoji=_text_or(data.get("emoji"), DEFAULT_EMOJI),
        items=items,
    )


def normalize_dataset(
    raw: Any,
    *,
    now: str | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Dataset:
    """Build a Dataset from an arbitrary document.

    Category ids must be unique in the dataset and item ids unique across
    all categories (items move between categories). A later duplicate gets
    a fresh id; the first occurrence in traversal order keeps the original.
    """
    data = _mapping(raw, "dataset")
    ts = now or now_iso()

    raw_categories = data.get("categories")
    if not isinstance(raw_categories, list):
        raw_categories = []

    seen_categories: set[str] = set()
    seen_items: set[str] = set()
    categories = []
    for raw_category in raw_categories:
        if not isinstance(raw_category, Mapping):
            logger.warning("Dropping non-object category: %r", raw_category)
            continue
        categories.append(
            normalize_category(
                raw_category,
                now=ts,
                id_factory=id_factory,
                seen_ids=seen_categories,
                seen_item_ids=seen_items,
            )
        )

    version = data.get("version")
    if not isinstance(version, int) or isinstance(version, bool):
        version = SCHEMA_VERSION

    return Dataset(
        version=version,
        created_at=_text_or(data.get("createdAt"), ts),
        updated_at=_text_or(data.get("updatedAt"), ts),
        categories=categories,
    )
