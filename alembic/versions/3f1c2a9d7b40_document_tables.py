"""document tables

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:04.218337

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _create_document_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("item_id", sa.Text(), nullable=False),
        sa.Column("attributes", postgresql.JSONB(), nullable=False),
        sa.PrimaryKeyConstraint("owner_id", "item_id"),
    )


def upgrade() -> None:
    _create_document_table("todos")
    _create_document_table("categories")
    op.create_index(
        "idx_todos_category_id",
        "todos",
        ["owner_id", sa.text("(attributes ->> 'categoryId')")],
    )


def downgrade() -> None:
    op.drop_index("idx_todos_category_id", table_name="todos")
    op.drop_table("categories")
    op.drop_table("todos")
