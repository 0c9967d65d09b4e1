"""Key-value table store contract shared by every storage backend."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class StoreError(Exception):
    """Raised by a backend when a store call fails."""


class ItemNotFound(StoreError):
    """Raised when an update targets a key that holds no item."""


@dataclass(frozen=True)
class Table:
    """A logical table addressed by (partition key, sort key)."""

    name: str
    partition_key: str
    sort_key: str

    def key(self, owner_id: str, item_id: str) -> dict[str, str]:
        return {self.partition_key: owner_id, self.sort_key: item_id}

    def split_key(self, key: Mapping[str, Any]) -> tuple[str, str]:
        return key[self.partition_key], key[self.sort_key]


@dataclass(frozen=True)
class Tables:
    todos: Table
    categories: Table

    @classmethod
    def named(cls, todos: str = "todos", categories: str = "categories") -> Tables:
        return cls(
            todos=Table(name=todos, partition_key="userId", sort_key="todoId"),
            categories=Table(name=categories, partition_key="userId", sort_key="categoryId"),
        )


class TableStore(Protocol):
    """Operations the todo and category handlers need from a table store."""

    def put(self, table: Table, item: Mapping[str, Any]) -> None:
        """Unconditionally write ``item``, replacing any item with the same key."""
        ...

    def query(
        self,
        table: Table,
        owner_id: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        """Return every item in the owner's partition, optionally matching ``filters``."""
        ...

    def update(
        self,
        table: Table,
        key: Mapping[str, Any],
        attributes: Mapping[str, Any],
    ) -> dict:
        """Set the named attributes on an existing item and return the new item."""
        ...

    def delete(self, table: Table, key: Mapping[str, Any]) -> None:
        """Delete the item at ``key``; deleting a missing key is not an error."""
        ...

    def health_check(self) -> bool: ...
