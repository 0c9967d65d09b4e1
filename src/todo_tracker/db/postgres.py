"""Lakebase (PostgreSQL) table store.

Each logical table is a document table ``(owner_id, item_id, attributes)``
with a composite primary key, so the key-value contract maps onto plain SQL:
upsert on conflict, partial update by JSONB merge, filters by JSONB equality.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Generator

import psycopg
import structlog
from psycopg import sql
from psycopg.types.json import Jsonb

from todo_tracker.config import LakebaseSettings
from todo_tracker.db.store import ItemNotFound, StoreError, Table

logger = structlog.get_logger()


class LakebaseConnectionFactory:
    """Opens Lakebase connections, refreshing the OAuth password per connection."""

    def __init__(self, settings: LakebaseSettings | None = None):
        self._settings = settings or LakebaseSettings()
        self._host = self._settings.get_host()
        self._database = self._settings.database
        self._username = self._settings.get_user()

        logger.info(
            "lakebase_factory_initialized",
            host=self._host,
            database=self._database,
            user=self._username,
        )

    def get_connection(self) -> psycopg.Connection:
        return psycopg.connect(
            host=self._host,
            port=5432,
            dbname=self._database,
            user=self._username,
            password=self._settings.get_password(),
            sslmode="require",
        )


class PostgresTableStore:
    """TableStore over Lakebase document tables."""

    def __init__(self, factory: LakebaseConnectionFactory | None = None):
        self._factory = factory or LakebaseConnectionFactory()

    @contextmanager
    def session(self) -> Generator[psycopg.Connection, None, None]:
        conn = self._factory.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _execute(self, table: Table, query: sql.Composed, params: list) -> list[tuple]:
        try:
            with self.session() as conn, conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall() if cur.description else []
        except psycopg.Error as e:
            raise StoreError(f"{table.name}: {e}") from e

    def put(self, table: Table, item: Mapping[str, Any]) -> None:
        owner_id, item_id = table.split_key(item)
        query = sql.SQL(
            """
            INSERT INTO {table} (owner_id, item_id, attributes)
            VALUES (%s, %s, %s)
            ON CONFLICT (owner_id, item_id)
            DO UPDATE SET attributes = EXCLUDED.attributes
            """
        ).format(table=sql.Identifier(table.name))
        self._execute(table, query, [owner_id, item_id, Jsonb(dict(item))])

    def query(
        self,
        table: Table,
        owner_id: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        conditions = [sql.SQL("owner_id = %s")]
        params: list = [owner_id]
        for name, value in (filters or {}).items():
            conditions.append(sql.SQL("attributes -> %s::text = %s"))
            params.extend([name, Jsonb(value)])

        query = sql.SQL(
            "SELECT attributes FROM {table} WHERE {where} ORDER BY item_id"
        ).format(
            table=sql.Identifier(table.name),
            where=sql.SQL(" AND ").join(conditions),
        )
        return [row[0] for row in self._execute(table, query, params)]

    def update(
        self,
        table: Table,
        key: Mapping[str, Any],
        attributes: Mapping[str, Any],
    ) -> dict:
        owner_id, item_id = table.split_key(key)
        if attributes:
            query = sql.SQL(
                """
                UPDATE {table}
                SET attributes = attributes || %s
                WHERE owner_id = %s AND item_id = %s
                RETURNING attributes
                """
            ).format(table=sql.Identifier(table.name))
            params = [Jsonb(dict(attributes)), owner_id, item_id]
        else:
            query = sql.SQL(
                "SELECT attributes FROM {table} WHERE owner_id = %s AND item_id = %s"
            ).format(table=sql.Identifier(table.name))
            params = [owner_id, item_id]

        rows = self._execute(table, query, params)
        if not rows:
            raise ItemNotFound(f"{table.name}: no item for key {dict(key)}")
        return rows[0][0]

    def delete(self, table: Table, key: Mapping[str, Any]) -> None:
        owner_id, item_id = table.split_key(key)
        query = sql.SQL(
            "DELETE FROM {table} WHERE owner_id = %s AND item_id = %s"
        ).format(table=sql.Identifier(table.name))
        self._execute(table, query, [owner_id, item_id])

    def health_check(self) -> bool:
        try:
            with self.session() as conn, conn.cursor() as cur:
                cur.execute("SELECT 1")
            return True
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            return False
