# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from todo_tracker.api.dependencies import get_store, get_tables
from todo_tracker.api.main import app
from todo_tracker.api.user import get_owner_id
from todo_tracker.db.memory import InMemoryTableStore
from todo_tracker.db.store import Tables

OWNER = "test-user"


@pytest.fixture()
def tables() -> Tables:
    return Tables.named()


@pytest.fixture()
def store() -> InMemoryTableStore:
    return InMemoryTableStore()


@pytest.fixture()
def client(store, tables):
    """TestClient wired to an in-memory store and a fixed owner."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_tables] = lambda: tables
    app.dependency_overrides[get_owner_id] = lambda: OWNER
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_todo(todo_id: str, task: str, *, category_id: str = "personal",
              completed: bool = False, created: str = "2024-01-01T00:00:00.000Z") -> dict:
    return {
        "userId": OWNER,
        "todoId": todo_id,
        "task": task,
        "completed": completed,
        "categoryId": category_id,
        "created": created,
    }
