"""Developer environment setup for Todo Tracker.

Provisions the store selected by STORE_BACKEND:

- dynamodb: creates the todos and categories tables (idempotent)
- lakebase: runs the alembic migrations that create the document tables
- memory:   nothing to provision

Usage:
    uv run python scripts/dev_setup.py                  # use STORE_BACKEND
    uv run python scripts/dev_setup.py --backend dynamodb
    uv run python scripts/dev_setup.py --no-wait        # don't wait for ACTIVE tables
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from todo_tracker.config import get_settings  # noqa: E402
from todo_tracker.db.backends import build_tables  # noqa: E402
from todo_tracker.infra import DynamoTableProvisioner  # noqa: E402
from todo_tracker.logging_setup import configure_logging  # noqa: E402


def _run_migrations() -> None:
    project_root = Path(__file__).resolve().parents[1]
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=project_root,
    )
    if result.returncode != 0:
        print("\nMigrations failed. You can retry with:")
        print("  uv run alembic upgrade head")
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(description="Provision the todo store")
    parser.add_argument(
        "--backend",
        choices=["memory", "dynamodb", "lakebase"],
        help="Override STORE_BACKEND",
    )
    parser.add_argument(
        "--no-wait", action="store_true", help="Return before new tables are ACTIVE"
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    backend = args.backend or settings.store.backend
    tables = build_tables(settings)

    print(f"Provisioning '{backend}' store...")
    if backend == "dynamodb":
        provisioner = DynamoTableProvisioner(settings=settings.dynamodb)
        created = provisioner.ensure_all(tables, wait=not args.no_wait)
        for table in (tables.todos, tables.categories):
            state = "created" if table.name in created else "already exists"
            print(f"  {table.name}: {state}")
    elif backend == "lakebase":
        _run_migrations()
    else:
        print("  In-memory store needs no provisioning")

    print("\nStart the API:")
    print("  uv run uvicorn app:app --reload --host 0.0.0.0 --port 8000")


if __name__ == "__main__":
    main()
