# tests/test_config.py

from __future__ import annotations

from todo_tracker.config import DynamoSettings, Settings, StoreSettings
from todo_tracker.db.backends import build_store, build_tables
from todo_tracker.db.memory import InMemoryTableStore


def test_store_settings_read_legacy_table_names(monkeypatch) -> None:
    monkeypatch.setenv("DYNAMODB_TODOS_TABLE", "prod-todos")
    monkeypatch.setenv("STORE_CATEGORIES_TABLE", "prod-categories")

    settings = StoreSettings(_env_file=None)

    assert settings.todos_table == "prod-todos"
    assert settings.categories_table == "prod-categories"


def test_dynamo_client_kwargs(monkeypatch) -> None:
    for name in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_REGION", "eu-west-1")

    assert DynamoSettings(_env_file=None).client_kwargs() == {"region_name": "eu-west-1"}

    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localhost:8000")
    assert DynamoSettings(_env_file=None).client_kwargs() == {
        "region_name": "eu-west-1",
        "aws_access_key_id": "key",
        "aws_secret_access_key": "secret",
        "endpoint_url": "http://localhost:8000",
    }


def test_memory_backend(monkeypatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("DEFAULT_USER_ID", "someone")
    monkeypatch.delenv("DYNAMODB_TODOS_TABLE", raising=False)
    monkeypatch.delenv("STORE_TODOS_TABLE", raising=False)

    settings = Settings(_env_file=None)

    assert settings.default_user_id == "someone"
    assert isinstance(build_store(settings), InMemoryTableStore)
    assert build_tables(settings).todos.name == "todos"
    assert build_tables(settings).todos.sort_key == "todoId"


def test_health(client) -> None:
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["store"] == "connected"
