"""Default dataset used on first run and after a wipe."""

from typing import Callable

from .ids import new_id, now_iso
from .models import Category, Dataset

DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("🍜", "Comida"),
    ("🎂", "Cumpleaños"),
    ("🎵", "Música"),
    ("🎬", "Películas/Series"),
    ("🎮", "Juegos"),
    ("🐶", "Mascotas"),
    ("📍", "Lugares"),
    ("🎁", "Ideas de regalo"),
]


def default_dataset(
    now: str | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Dataset:
    """Build the seed dataset: the default categories, no items."""
    ts = now or now_iso()
    categories = [
        Category(id=id_factory(), name=name, emoji=emoji)
        for emoji, name in DEFAULT_CATEGORIES
    ]
    return Dataset(created_at=ts, updated_at=ts, categories=categories)
