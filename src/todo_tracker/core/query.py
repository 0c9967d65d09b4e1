"""In-memory list pipeline for todos: search, category filter, sort, paginate."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from todo_tracker.core.models import ALL_CATEGORIES, SortField, SortOrder

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _positive_int(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


@dataclass(frozen=True)
class ListParams:
    search: str = ""
    category_id: str = ""
    sort_by: SortField = SortField.CREATED
    sort_order: SortOrder = SortOrder.DESC
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> ListParams:
        """Build params from raw query-string values.

        Anything unparseable falls back to its default instead of failing the
        request: page/limit that are not positive integers become 1/10, an
        unknown sortBy becomes ``created`` and any sortOrder except ``asc``
        is descending.
        """
        try:
            sort_by = SortField(query.get("sortBy") or SortField.CREATED.value)
        except ValueError:
            sort_by = SortField.CREATED
        sort_order = SortOrder.ASC if query.get("sortOrder") == "asc" else SortOrder.DESC
        return cls(
            search=query.get("search") or "",
            category_id=query.get("categoryId") or "",
            sort_by=sort_by,
            sort_order=sort_order,
            page=_positive_int(query.get("page"), DEFAULT_PAGE),
            limit=_positive_int(query.get("limit"), DEFAULT_LIMIT),
        )


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class TodoPage:
    items: list[dict]
    pagination: Pagination


def filter_by_search(items: Iterable[dict], search: str) -> list[dict]:
    if not search:
        return list(items)
    needle = search.casefold()
    return [item for item in items if needle in str(item.get("task") or "").casefold()]


def filter_by_category(items: Iterable[dict], category_id: str) -> list[dict]:
    if not category_id or category_id == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if item.get("categoryId") == category_id]


def _parse_created(value: Any) -> datetime:
    # Missing or malformed timestamps order as the earliest instant.
    if not isinstance(value, str) or not value:
        return _EARLIEST
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return _EARLIEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(field: SortField):
    if field is SortField.CREATED:
        return lambda item: (_parse_created(item.get("created")), str(item.get("todoId", "")))
    if field is SortField.COMPLETED:
        return lambda item: (bool(item.get("completed")), str(item.get("todoId", "")))
    return lambda item: (str(item.get("task") or ""), str(item.get("todoId", "")))


def sort_todos(items: Iterable[dict], field: SortField, order: SortOrder) -> list[dict]:
    """Order todos by ``field``; equal values are ordered by todo identity."""
    return sorted(items, key=_sort_key(field), reverse=order is SortOrder.DESC)


def paginate(items: list[dict], page: int, limit: int) -> TodoPage:
    start = (page - 1) * limit
    end = start + limit
    total = len(items)
    return TodoPage(
        items=items[start:end],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            has_next=end < total,
            has_prev=page > 1,
        ),
    )


def apply_list_query(items: Iterable[dict], params: ListParams) -> TodoPage:
    """Run the full pipeline over every todo of one owner."""
    matched = filter_by_search(items, params.search)
    matched = filter_by_category(matched, params.category_id)
    ordered = sort_todos(matched, params.sort_by, params.sort_order)
    return paginate(ordered, params.page, params.limit)
