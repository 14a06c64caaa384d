"""Data service: the single owner of the in-memory notebook.

Loads from the remote mirror, then the local store, then the default seed.
Every mutation goes through this class and ends with exactly one save(),
which writes the local store before returning and then pushes the same
snapshot to the remote mirror as a detached task.

Two clients saving to the same remote overwrite each other: the remote
copy is last-writer-wins and there is no merge.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from ..errors import NotebookError, NotFoundError, ValidationError
from . import query
from .ids import Clock, new_id
from .models import DEFAULT_EMOJI, Category, Dataset, FlatItem, Item
from .normalize import normalize_dataset, validate_document
from .remote import NullRemoteMirror, RemoteMirror
from .seed import default_dataset
from .store import LocalStore

if TYPE_CHECKING:
    from ..logging import JSONLLogger

logger = logging.getLogger(__name__)


class EditState(Enum):
    """Lifecycle of an item edit."""

    EDITING = "editing"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class NotebookService:
    """Owns the dataset and mediates every read and write of it."""

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteMirror | None = None,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] = new_id,
        activity: JSONLLogger | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Local persistence, always written on save.
            remote: Optional remote mirror; None means local only.
            clock: Timestamp source. A fresh Clock if omitted.
            id_factory: Generator for new category and item ids.
            activity: Optional JSONL activity log.
        """
        self.store = store
        self.remote = remote or NullRemoteMirror()
        self.clock = clock or Clock()
        self._new_id = id_factory
        self.activity = activity
        self._data: Dataset | None = None
        self._pending: set[asyncio.Task] = set()
        self.last_source: str | None = None

    @property
    def data(self) -> Dataset:
        """The authoritative dataset."""
        if self._data is None:
            raise NotebookError("Notebook not loaded; call load() first")
        return self._data

    @property
    def pending_remote_writes(self) -> int:
        return len(self._pending)

    # ── Load / save ───────────────────────────────────────────

    async def load(self) -> Dataset:
        """Load the dataset: remote first, then local, then the default seed."""
        document: dict[str, Any] | None = None
        source = "default"

        if self.remote.enabled:
            document = await self.remote.load()
            if document is not None:
                source = "remote"
            self._log_remote("load", document is not None)

        if document is None:
            document = self.store.load()
            if document is not None:
                source = "local"

        now = self.clock.now()
        if document is None:
            document = default_dataset(now=now, id_factory=self._new_id).to_dict()
        dataset = normalize_dataset(document, now=now, id_factory=self._new_id)

        self._data = dataset
        self.last_source = source
        logger.info(
            "Loaded notebook from %s (%d categories, %d items)",
            source,
            len(dataset.categories),
            dataset.item_count,
        )
        if self.activity:
            self.activity.log_load(
                source, categories=len(dataset.categories), items=dataset.item_count
            )
        return dataset

    def save(self) -> asyncio.Task | None:
        """Persist the dataset.

        The local write completes before this returns; its failure is logged,
        not raised. The remote write, if a mirror is enabled, runs as a
        detached task on the running event loop with no retry.

        Returns:
            The remote write task, or None when no remote write was started.
        """
        dataset = self.data
        dataset.updated_at = self.clock.now()
        document = dataset.to_dict()

        saved = self.store.save(document)
        if not saved:
            logger.warning("Local save failed; changes are only in memory")
        if self.activity:
            self.activity.log_save(saved, updated_at=dataset.updated_at)

        if not self.remote.enabled:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; skipping remote save")
            return None

        task = loop.create_task(self._push_remote(document))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _push_remote(self, document: dict[str, Any]) -> bool:
        try:
            ok = await self.remote.save(document)
        except Exception as e:
            logger.error("Remote save raised: %s", e)
            self._log_remote("save", False, error=str(e))
            return False
        self._log_remote("save", ok)
        return ok

    async def flush(self) -> None:
        """Wait for every pending remote write to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _log_remote(self, action: str, success: bool, error: str | None = None) -> None:
        if self.activity:
            self.activity.log_remote(action, success, error=error)

    # ── Queries ───────────────────────────────────────────────

    def find_category(self, category_id: str) -> Category | None:
        for category in self.data.categories:
            if category.id == category_id:
                return category
        return None

    def find_item(self, item_id: str) -> tuple[Category, Item] | None:
        """Locate an item anywhere in the dataset."""
        for category in self.data.categories:
            item = category.find_item(item_id)
            if item is not None:
                return category, item
        return None

    def all_items(self, category_id: str | None = None) -> list[FlatItem]:
        """Items tagged with their category, newest first.

        Args:
            category_id: Restrict to one category.

        Raises:
            NotFoundError: If category_id is given and does not exist.
        """
        if category_id is None:
            return query.flatten(self.data)
        return query.flatten_category(self._require_category(category_id))

    @staticmethod
    def search_filter(items: list[FlatItem], q: str | None) -> list[FlatItem]:
        return query.search_filter(items, q)

    def overview(self, limit: int = 10) -> query.Overview:
        return query.overview(self.data, limit=limit)

    def export_document(self) -> dict[str, Any]:
        return self.data.to_dict()

    # ── Mutations ─────────────────────────────────────────────

    def create_category(self, name: str, emoji: str = DEFAULT_EMOJI) -> Dataset:
        name = _required(name, "name")
        emoji = (emoji or "").strip() or DEFAULT_EMOJI

        category = Category(id=self._new_id(), name=name, emoji=emoji)
        self.data.categories.append(category)
        self._log_mutation("create_category", category_id=category.id)
        self.save()
        return self.data

    def create_item(self, category_id: str, key: str, value: str, note: str = "") -> Dataset:
        key = _required(key, "key")
        value = _required(value, "value")
        category = self._require_category(category_id)

        ts = self.clock.now()
        item = Item(
            id=self._new_id(),
            key=key,
            value=value,
            note=(note or "").strip(),
            created_at=ts,
            updated_at=ts,
        )
        category.items.append(item)
        self._log_mutation("create_item", category_id=category.id, item_id=item.id)
        self.save()
        return self.data

    def update_item(
        self,
        category_id: str,
        item_id: str,
        key: str,
        value: str,
        note: str = "",
        new_category_id: str | None = None,
    ) -> Dataset:
        """Edit an item and optionally move it to another category.

        The item is removed from its category and appended to the target
        (the same category when new_category_id is None), keeping its id and
        created_at. All lookups and checks happen before anything changes.
        """
        key = _required(key, "key")
        value = _required(value, "value")
        source = self._require_category(category_id)
        target = self._require_category(new_category_id or category_id)
        index = _index_of(source, item_id)

        existing = source.items[index]
        updated = Item(
            id=existing.id,
            key=key,
            value=value,
            note=(note or "").strip(),
            created_at=existing.created_at,
            updated_at=self.clock.now(after=existing.updated_at),
        )
        del source.items[index]
        target.items.append(updated)

        self._log_mutation(
            "update_item",
            category_id=target.id,
            item_id=updated.id,
            moved_from=source.id if source is not target else None,
        )
        self.save()
        return self.data

    def delete_item(self, category_id: str, item_id: str) -> Dataset:
        category = self._require_category(category_id)
        index = _index_of(category, item_id)

        del category.items[index]
        self._log_mutation("delete_item", category_id=category.id, item_id=item_id)
        self.save()
        return self.data

    def replace_dataset(self, document: Any) -> Dataset:
        """Replace everything with an imported document.

        Raises:
            InvalidDatasetError: If the document has no categories list. The
                current dataset is left untouched.
        """
        validate_document(document)
        dataset = normalize_dataset(document, now=self.clock.now(), id_factory=self._new_id)

        self._data = dataset
        self._log_mutation(
            "replace_dataset",
            categories=len(dataset.categories),
            items=dataset.item_count,
        )
        self.save()
        return self.data

    def reset_dataset(self) -> Dataset:
        """Wipe local data and start over from the default seed."""
        self.store.clear()
        self._data = default_dataset(now=self.clock.now(), id_factory=self._new_id)
        self._log_mutation("reset_dataset")
        self.save()
        return self.data

    def begin_edit(self, category_id: str, item_id: str) -> EditSession:
        """Open an edit bound to (category_id, item_id)."""
        category = self._require_category(category_id)
        item = category.items[_index_of(category, item_id)]
        return EditSession(
            service=self,
            category_id=category.id,
            item_id=item.id,
            key=item.key,
            value=item.value,
            note=item.note,
        )

    # ── Helpers ───────────────────────────────────────────────

    def _require_category(self, category_id: str) -> Category:
        category = self.find_category(category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    def _log_mutation(self, action: str, **fields: Any) -> None:
        logger.debug("%s %s", action, fields)
        if self.activity:
            extra = {k: v for k, v in fields.items() if v is not None}
            self.activity.log_mutation(action, **extra)


def _required(text: str | None, field_name: str) -> str:
    value = (text or "").strip()
    if not value:
        raise ValidationError(f"'{field_name}' cannot be empty")
    return value


def _index_of(category: Category, item_id: str) -> int:
    for index, item in enumerate(category.items):
        if item.id == item_id:
            return index
    raise NotFoundError("item", item_id)


@dataclass
class EditSession:
    """An open edit of one item.

    Holds the values to pre-fill the form with. submit() applies the edit
    through the service; cancel() closes it without touching the dataset.
    """

    service: NotebookService
    category_id: str
    item_id: str
    key: str = ""
    value: str = ""
    note: str = ""
    state: EditState = EditState.EDITING

    @property
    def is_open(self) -> bool:
        return self.state is EditState.EDITING

    def submit(
        self,
        key: str,
        value: str,
        note: str = "",
        category_id: str | None = None,
    ) -> Dataset:
        """Apply the edit. A failed submit leaves the session open."""
        self._ensure_open()
        dataset = self.service.update_item(
            self.category_id, self.item_id, key, value, note, category_id
        )
        self.state = EditState.SUBMITTED
        return dataset

    def cancel(self) -> None:
        self._ensure_open()
        self.state = EditState.CANCELLED

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise NotebookError(f"Edit of item {self.item_id} is already {self.state.value}")
