"""Dict-backed table store for tests and local development."""

from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from typing import Any

from todo_tracker.db.store import ItemNotFound, Table


class InMemoryTableStore:
    """Process-local TableStore; items are deep-copied in and out."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[tuple[str, str], dict]] = {}
        self._lock = threading.Lock()

    def _rows(self, table: Table) -> dict[tuple[str, str], dict]:
        return self._tables.setdefault(table.name, {})

    def put(self, table: Table, item: Mapping[str, Any]) -> None:
        with self._lock:
            self._rows(table)[table.split_key(item)] = copy.deepcopy(dict(item))

    def query(
        self,
        table: Table,
        owner_id: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        with self._lock:
            rows = [
                item
                for (owner, _), item in self._rows(table).items()
                if owner == owner_id
            ]
            if filters:
                rows = [
                    item
                    for item in rows
                    if all(item.get(name) == value for name, value in filters.items())
                ]
            return sorted((copy.deepcopy(item) for item in rows), key=lambda i: i[table.sort_key])

    def update(
        self,
        table: Table,
        key: Mapping[str, Any],
        attributes: Mapping[str, Any],
    ) -> dict:
        with self._lock:
            item = self._rows(table).get(table.split_key(key))
            if item is None:
                raise ItemNotFound(f"{table.name}: no item for key {dict(key)}")
            item.update(copy.deepcopy(dict(attributes)))
            return copy.deepcopy(item)

    def delete(self, table: Table, key: Mapping[str, Any]) -> None:
        with self._lock:
            self._rows(table).pop(table.split_key(key), None)

    def health_check(self) -> bool:
        return True
