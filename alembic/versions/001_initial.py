"""Initial migration - create all tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Categories table
    op.create_table(
        "categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # Labels table
    op.create_table(
        "labels",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    # Todos table
    op.create_table(
        "todos",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("due_date", sa.Date),
        sa.Column("is_important", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "status",
            sa.Enum("INBOX", "TODO", "DONE", name="todostatus", native_enum=False, length=10),
            nullable=False,
            server_default="INBOX",
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("category_id", sa.String(36), sa.ForeignKey("categories.id", ondelete="SET NULL")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    # Todo-Label association table
    op.create_table(
        "todo_labels",
        sa.Column("todo_id", sa.String(36), sa.ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("label_id", sa.String(36), sa.ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True),
    )

    # Create indexes for common queries
    op.create_index("ix_categories_position", "categories", ["position"])
    op.create_index("ix_todos_category_id", "todos", ["category_id"])
    op.create_index("ix_todos_status", "todos", ["status"])
    op.create_index("ix_todos_due_date", "todos", ["due_date"])
    op.create_index("ix_todo_labels_label_id", "todo_labels", ["label_id"])


def downgrade() -> None:
    op.drop_table("todo_labels")
    op.drop_table("todos")
    op.drop_table("labels")
    op.drop_table("categories")
