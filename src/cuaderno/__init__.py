"""Cuaderno: a personal data notebook of categorized key/value items."""

from .config import NotebookConfig, load_config
from .data import Category, Dataset, FlatItem, Item, NotebookService
from .errors import InvalidDatasetError, NotebookError, NotFoundError, ValidationError

__version__ = "0.1.0"

__all__ = [
    "Category",
    "Dataset",
    "FlatItem",
    "InvalidDatasetError",
    "Item",
    "NotFoundError",
    "NotebookConfig",
    "NotebookError",
    "NotebookService",
    "ValidationError",
    "load_config",
]
