"""JSONL activity log for the notebook."""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    """A single activity log entry."""

    timestamp: str
    event: str
    source: str | None = None
    category_id: str | None = None
    item_id: str | None = None
    success: bool | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


class JSONLLogger:
    """Writes notebook activity (loads, saves, remote calls, mutations) as JSONL.

    Write failures are reported through the module logger and never raised,
    so activity logging cannot fail a save or a mutation.
    """

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "activity.jsonl",
        max_size_mb: float = 5.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".cuaderno" / "logs"
        self.log_dir = Path(log_dir)
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create activity log dir %s: %s", self.log_dir, e)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        try:
            self._rotate_if_needed()
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")
        except OSError as e:
            logger.warning("Cannot write activity log %s: %s", self.log_path, e)

    def log(
        self,
        event: str,
        *,
        source: str | None = None,
        category_id: str | None = None,
        item_id: str | None = None,
        success: bool | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        extra = {k: v for k, v in extra.items() if v is not None}
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            source=source,
            category_id=category_id,
            item_id=item_id,
            success=success,
            error=error,
            extra=extra,
        )
        self._write(entry)

    def log_load(self, source: str, *, categories: int, items: int) -> None:
        """Log which source a load was served from."""
        self.log("load", source=source, categories=categories, items=items)

    def log_save(self, success: bool, *, updated_at: str | None = None) -> None:
        """Log a local save."""
        self.log("save", source="local", success=success, updated_at=updated_at)

    def log_remote(self, action: str, success: bool, *, error: str | None = None) -> None:
        """Log a remote mirror call ('load' or 'save')."""
        self.log(f"remote_{action}", source="remote", success=success, error=error)

    def log_mutation(
        self,
        action: str,
        *,
        category_id: str | None = None,
        item_id: str | None = None,
        **extra: Any,
    ) -> None:
        """Log a change to the dataset."""
        self.log(action, category_id=category_id, item_id=item_id, **extra)

