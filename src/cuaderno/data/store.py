"""Local persistence for the notebook document."""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .normalize import is_valid_document

logger = logging.getLogger(__name__)


class LocalStore(ABC):
    """Durable store holding one serialized dataset document."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored document, or None if absent or invalid."""
        ...

    @abstractmethod
    def save(self, document: dict[str, Any]) -> bool:
        """Persist the document. Returns False on failure instead of raising."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored document."""
        ...


class JSONFileStore(LocalStore):
    """Stores the document as a JSON file.

    The file is replaced atomically on every save, so a crash mid-write
    leaves the previous document in place.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store with a file path.

        Args:
            path: Location of the JSON document. Parent directories are
                created on first save.
        """
        self.path = path

    def load(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable document at %s: %s", self.path, e)
            return None
        except OSError as e:
            logger.warning("Cannot read %s: %s", self.path, e)
            return None

        if not is_valid_document(document):
            logger.warning("Ignoring document without a categories list at %s", self.path)
            return None
        return document

    def save(self, document: dict[str, Any]) -> bool:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            payload = json.dumps(document, ensure_ascii=False, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save notebook to %s: %s", self.path, e)
            return False
        return True

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove %s: %s", self.path, e)


class InMemoryStore(LocalStore):
    """Process-local store, for tests and throwaway sessions.

    Keeps the serialized text rather than the object so callers never share
    references with what is stored.
    """

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._raw: str | None = None
        self.saves = 0
        if document is not None:
            self._raw = json.dumps(document, ensure_ascii=False)

    def load(self) -> dict[str, Any] | None:
        if self._raw is None:
            return None
        document = json.loads(self._raw)
        return document if is_valid_document(document) else None

    def save(self, document: dict[str, Any]) -> bool:
        try:
            self._raw = json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize notebook: %s", e)
            return False
        self.saves += 1
        return True

    def clear(self) -> None:
        self._raw = None
