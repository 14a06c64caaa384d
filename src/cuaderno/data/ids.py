"""Identifier and timestamp utilities."""

import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable


def new_id() -> str:
    """Generate an opaque identifier for a category or item.

    A random uuid4 prefix followed by the epoch milliseconds in hex, so two
    ids only collide if both parts do.
    """
    return f"{uuid.uuid4().hex[:12]}{int(time.time() * 1000):x}"


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse a timestamp written by format_timestamp. None if unparseable."""
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def now_iso() -> str:
    """Current time as an ISO-8601 UTC string."""
    return format_timestamp(datetime.now(timezone.utc))


class Clock:
    """Source of strictly increasing timestamps.

    Every call to now() returns a value later than the previous one from the
    same clock, even when the system clock has not advanced (or went back).
    Timestamps share one fixed-width format, so string order is time order.
    """

    def __init__(self, source: Callable[[], datetime] | None = None) -> None:
        self._source = source or (lambda: datetime.now(timezone.utc))
        self._last: datetime | None = None

    def now(self, after: str | None = None) -> str:
        """Next timestamp.

        Args:
            after: A stored timestamp the result must also be later than,
                e.g. an item's current updatedAt. Ignored if unparseable.
        """
        current = self._source().astimezone(timezone.utc)
        # Drop sub-millisecond precision so ties are detected on what is emitted
        current = current.replace(microsecond=current.microsecond // 1000 * 1000)

        floor = self._last
        previous = parse_timestamp(after) if after else None
        if previous is not None and (floor is None or previous > floor):
            floor = previous

        if floor is not None and current <= floor:
            current = floor + timedelta(milliseconds=1)
        self._last = current
        return format_timestamp(current)
