"""FastAPI dependencies wiring the store into the todo and category services."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from todo_tracker.config import get_settings
from todo_tracker.core.categories import CategoryService
from todo_tracker.core.todos import TodoService
from todo_tracker.db.backends import build_store, build_tables
from todo_tracker.db.store import Tables, TableStore


@lru_cache
def get_store() -> TableStore:
    return build_store(get_settings())


def get_tables() -> Tables:
    return build_tables(get_settings())


def get_todo_service(
    store: TableStore = Depends(get_store),
    tables: Tables = Depends(get_tables),
) -> TodoService:
    return TodoService(store, tables.todos)


def get_category_service(
    store: TableStore = Depends(get_store),
    tables: Tables = Depends(get_tables),
) -> CategoryService:
    return CategoryService(store, tables)
