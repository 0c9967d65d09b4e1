"""Todo record operations against the table store."""

from __future__ import annotations

from typing import Any

import structlog

from todo_tracker.core.models import new_id, utc_now_iso
from todo_tracker.core.query import ListParams, TodoPage, apply_list_query
from todo_tracker.db.store import Table, TableStore

logger = structlog.get_logger()


class TodoService:
    def __init__(self, store: TableStore, table: Table):
        self._store = store
        self._table = table

    def list_todos(self, owner_id: str, params: ListParams) -> TodoPage:
        """Read the owner's whole partition, then filter, sort and page in memory."""
        items = self._store.query(self._table, owner_id)
        return apply_list_query(items, params)

    def create_todo(self, owner_id: str, task: str, category_id: str | None = None) -> dict:
        todo = {
            "userId": owner_id,
            "todoId": new_id(),
            "task": task,
            "completed": False,
            "categoryId": category_id,
            "created": utc_now_iso(),
        }
        self._store.put(self._table, todo)
        logger.info("todo_created", todo_id=todo["todoId"], category_id=category_id)
        return todo

    def update_todo(
        self,
        owner_id: str,
        todo_id: str,
        *,
        completed: bool | None = None,
        task: str | None = None,
    ) -> dict:
        """Set only the fields that were given; others keep their stored value."""
        changes: dict[str, Any] = {}
        if completed is not None:
            changes["completed"] = completed
        if task is not None:
            changes["task"] = task

        todo = self._store.update(self._table, self._table.key(owner_id, todo_id), changes)
        logger.info("todo_updated", todo_id=todo_id, fields=sorted(changes))
        return todo

    def delete_todo(self, owner_id: str, todo_id: str) -> None:
        self._store.delete(self._table, self._table.key(owner_id, todo_id))
        logger.info("todo_deleted", todo_id=todo_id)
