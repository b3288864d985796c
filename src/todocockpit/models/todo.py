"""Todo model - the core entity of ToDo Cockpit."""

import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Integer, Boolean, Date, DateTime, Enum, ForeignKey, case
from sqlalchemy.orm import Mapped, mapped_column, relationship

from todocockpit.models.base import Base


class TodoStatus(str, enum.Enum):
    """Workflow state of a todo, in display order."""

    INBOX = "INBOX"
    TODO = "TODO"
    DONE = "DONE"


# Declaration order is the sort order (INBOX < TODO < DONE)
STATUS_ORDER = {status: index for index, status in enumerate(TodoStatus)}


class TodoLabel(Base):
    """Association table for Todo-Label many-to-many relationship."""

    __tablename__ = "todo_labels"

    todo_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("todos.id", ondelete="CASCADE"),
        primary_key=True,
    )
    label_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("labels.id", ondelete="CASCADE"),
        primary_key=True,
    )


class Todo(Base):
    """A single task, optionally filed under a category and labelled."""

    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date)
    is_important: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[TodoStatus] = mapped_column(
        Enum(TodoStatus, native_enum=False, length=10),
        default=TodoStatus.INBOX,
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Foreign keys
    category_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    labels: Mapped[list["Label"]] = relationship(  # noqa: F821
        secondary="todo_labels",
    )

    @property
    def label_ids(self) -> list[str]:
        """Ids of the attached labels, sorted for stable output."""
        return sorted(label.id for label in self.labels)

    @property
    def is_done(self) -> bool:
        return self.status == TodoStatus.DONE

    @classmethod
    def status_rank(cls):
        """SQL expression ranking ``status`` in declaration order."""
        return case(
            {status.value: rank for status, rank in STATUS_ORDER.items()},
            value=cls.status,
            else_=len(STATUS_ORDER),
        )

    def __repr__(self) -> str:
        return f"<Todo(title={self.title!r}, status={self.status.value})>"
