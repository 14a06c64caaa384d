"""Notebook data layer: models, normalization, persistence and the data service."""

from .ids import Clock, new_id, now_iso
from .models import Category, Dataset, FlatItem, Item
from .normalize import (
    is_valid_document,
    normalize_category,
    normalize_dataset,
    normalize_item,
    validate_document,
)
from .query import Overview
from .remote import HttpRemoteMirror, NullRemoteMirror, RemoteMirror, build_remote
from .seed import DEFAULT_CATEGORIES, default_dataset
from .service import EditSession, EditState, NotebookService
from .store import InMemoryStore, JSONFileStore, LocalStore

__all__ = [
    "Category",
    "Clock",
    "DEFAULT_CATEGORIES",
    "Dataset",
    "EditSession",
    "EditState",
    "FlatItem",
    "HttpRemoteMirror",
    "InMemoryStore",
    "Item",
    "JSONFileStore",
    "LocalStore",
    "NotebookService",
    "NullRemoteMirror",
    "Overview",
    "RemoteMirror",
    "build_remote",
    "default_dataset",
    "is_valid_document",
    "new_id",
    "normalize_category",
    "normalize_dataset",
    "normalize_item",
    "now_iso",
    "validate_document",
]
