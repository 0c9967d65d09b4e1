"""Store construction from settings."""

from __future__ import annotations

import structlog

from todo_tracker.config import Settings
from todo_tracker.db.store import Tables, TableStore

logger = structlog.get_logger()


def build_tables(settings: Settings) -> Tables:
    store_settings = settings.store
    return Tables.named(
        todos=store_settings.todos_table,
        categories=store_settings.categories_table,
    )


def build_store(settings: Settings) -> TableStore:
    """Create the TableStore selected by ``STORE_BACKEND``."""
    backend = settings.store.backend
    logger.info("building_table_store", backend=backend)

    if backend == "memory":
        from todo_tracker.db.memory import InMemoryTableStore

        return InMemoryTableStore()
    if backend == "lakebase":
        from todo_tracker.db.postgres import LakebaseConnectionFactory, PostgresTableStore

        return PostgresTableStore(LakebaseConnectionFactory(settings.lakebase))

    from todo_tracker.db.dynamodb import DynamoTableStore

    return DynamoTableStore(settings=settings.dynamodb)
