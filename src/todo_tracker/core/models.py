"""Domain models for Todo Tracker."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class SortField(str, Enum):
    """Todo attribute a list can be ordered by."""

    CREATED = "created"
    TASK = "task"
    COMPLETED = "completed"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# "all" (or an empty value) disables the category filter.
ALL_CATEGORIES = "all"

DEFAULT_CATEGORIES: tuple[dict, ...] = (
    {"categoryId": "personal", "name": "Personal", "color": "bg-blue-500"},
    {"categoryId": "work", "name": "Work", "color": "bg-green-500"},
    {"categoryId": "shopping", "name": "Shopping", "color": "bg-purple-500"},
)


def new_id() -> str:
    """Opaque, collision-resistant record identity."""
    return str(uuid4())


def utc_now_iso() -> str:
    """Millisecond-precision UTC timestamp, e.g. ``2024-01-01T00:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
