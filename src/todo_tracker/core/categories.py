"""Category record operations, including default seeding and cascading delete."""

from __future__ import annotations

import structlog

from todo_tracker.core.models import DEFAULT_CATEGORIES, new_id, utc_now_iso
from todo_tracker.db.store import Tables, TableStore

logger = structlog.get_logger()


class CategoryService:
    def __init__(self, store: TableStore, tables: Tables):
        self._store = store
        self._tables = tables

    def list_categories(self, owner_id: str) -> list[dict]:
        """Return the owner's categories, seeding the defaults when there are none.

        Defaults are written one at a time; a failure part way through leaves
        the ones already written in place.
        """
        categories = self._store.query(self._tables.categories, owner_id)
        if categories:
            return categories

        logger.info("seeding_default_categories", owner_id=owner_id)
        for default in DEFAULT_CATEGORIES:
            category = {"userId": owner_id, **default, "created": utc_now_iso()}
            self._store.put(self._tables.categories, category)
            categories.append(category)
        return categories

    def create_category(self, owner_id: str, name: str, color: str | None = None) -> dict:
        category = {
            "userId": owner_id,
            "categoryId": new_id(),
            "name": name,
            "color": color,
            "created": utc_now_iso(),
        }
        self._store.put(self._tables.categories, category)
        logger.info("category_created", category_id=category["categoryId"])
        return category

    def delete_category(self, owner_id: str, category_id: str) -> int:
        """Delete every todo in the category, then the category itself.

        The two phases are not atomic. If a delete fails, todos removed before
        it stay removed and the category may remain. Returns the number of
        todos deleted.
        """
        todos = self._tables.todos
        doomed = self._store.query(todos, owner_id, {"categoryId": category_id})
        for todo in doomed:
            self._store.delete(todos, todos.key(owner_id, todo["todoId"]))

        self._store.delete(self._tables.categories, self._tables.categories.key(owner_id, category_id))
        logger.info("category_deleted", category_id=category_id, todos_deleted=len(doomed))
        return len(doomed)
