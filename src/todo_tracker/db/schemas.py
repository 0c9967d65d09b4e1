"""SQLAlchemy ORM models for the Lakebase document tables."""

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TodoDocument(Base):
    """A todo item, addressed by (userId, todoId)."""

    __tablename__ = "todos"

    owner_id: Mapped[str] = mapped_column(Text, primary_key=True)
    item_id: Mapped[str] = mapped_column(Text, primary_key=True)
    attributes: Mapped[dict] = mapped_column(JSONB, nullable=False)


class CategoryDocument(Base):
    """A category, addressed by (userId, categoryId)."""

    __tablename__ = "categories"

    owner_id: Mapped[str] = mapped_column(Text, primary_key=True)
    item_id: Mapped[str] = mapped_column(Text, primary_key=True)
    attributes: Mapped[dict] = mapped_column(JSONB, nullable=False)
