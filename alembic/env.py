"""Alembic environment for the Lakebase store backend.

The database URL is built from LakebaseSettings, so migrations authenticate
with the same OAuth credential as the API. The application database is
created on first run by connecting to the default ``postgres`` database.
"""

from __future__ import annotations

import sys
from pathlib import Path
from urllib.parse import quote_plus

from alembic import context
from sqlalchemy import engine_from_config, pool

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from todo_tracker.config import LakebaseSettings  # noqa: E402
from todo_tracker.db.schemas import Base  # noqa: E402

config = context.config
target_metadata = Base.metadata


def _build_url(lb: LakebaseSettings) -> str:
    user = quote_plus(lb.get_user())
    password = quote_plus(lb.get_password())
    return (
        f"postgresql+psycopg://{user}:{password}@{lb.get_host()}:5432/{lb.database}"
        "?sslmode=require"
    )


def _ensure_database(lb: LakebaseSettings) -> None:
    import psycopg

    conn = psycopg.connect(
        host=lb.get_host(),
        port=5432,
        dbname="postgres",
        user=lb.get_user(),
        password=lb.get_password(),
        sslmode="require",
        autocommit=True,
    )
    try:
        conn.execute(f'CREATE DATABASE "{lb.database}"')
    except psycopg.errors.DuplicateDatabase:
        pass
    finally:
        conn.close()


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=_build_url(LakebaseSettings()),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    lb = LakebaseSettings()
    _ensure_database(lb)

    cfg = config.get_section(config.config_ini_section, {})
    cfg["sqlalchemy.url"] = _build_url(lb)
    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
