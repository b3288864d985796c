"""Todo schemas."""

import enum
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StrictInt, StrictStr, field_validator, model_validator

from todocockpit.models.todo import TodoStatus
from todocockpit.schemas.base import BaseSchema


def _empty_to_none(value: Any) -> Any:
    # The inbox is spelled both as a missing categoryId and as ""
    if value == "":
        return None
    return value


def _coerce_due_date(value: Any) -> Any:
    # Browsers send full ISO timestamps; only the calendar date is stored
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value).date()
    if value == "":
        return None
    return value


CategoryRef = Annotated[str | None, BeforeValidator(_empty_to_none)]
DueDate = Annotated[date | None, BeforeValidator(_coerce_due_date)]


class TodoCreate(BaseSchema):
    """Schema for creating a todo."""

    title: str = Field(..., min_length=1, max_length=500)
    due_date: DueDate = None
    is_important: bool = False
    status: TodoStatus = TodoStatus.INBOX
    category_id: CategoryRef = None
    labels: list[str] = Field(default_factory=list)


class TodoUpdate(BaseSchema):
    """Schema for partially updating a todo.

    Only fields present in the request are applied. ``dueDate``,
    ``categoryId`` may be set to null; ``title``, ``status`` and
    ``isImportant`` may not.
    """

    title: str | None = Field(None, min_length=1, max_length=500)
    due_date: DueDate = None
    is_important: bool | None = None
    status: TodoStatus | None = None
    category_id: CategoryRef = None
    labels: list[str] | None = None

    @model_validator(mode="after")
    def reject_null_required(self) -> "TodoUpdate":
        for name in ("title", "status", "is_important", "labels"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TodoResponse(BaseSchema):
    """Schema for todo responses."""

    id: str
    title: str
    due_date: date | None
    is_important: bool
    status: TodoStatus
    category_id: str | None
    labels: list[str] = Field(default_factory=list)
    position: int
    created_at: datetime
    updated_at: datetime

    @field_validator("labels", mode="before")
    @classmethod
    def label_ids_from_objects(cls, value: Any) -> Any:
        if value is None:
            return []
        return sorted(getattr(item, "id", item) for item in value)


class TodoPosition(BaseSchema):
    """One entry of a todo reorder request."""

    id: StrictStr
    position: StrictInt
    status: TodoStatus


class TodoReorderRequest(BaseSchema):
    """Schema for ``POST /todos/reorder``."""

    todos: list[TodoPosition] = Field(..., min_length=1)


class TodoStatisticsResponse(BaseSchema):
    """Aggregate counts over a list of todos."""

    total: int
    completed: int
    active: int
    important: int
    overdue: int
    due_today: int
    due_tomorrow: int
    due_this_week: int
    completion_rate: int


class TodoFilter(str, enum.Enum):
    """Completion filter for todo lists."""

    ALL = "ALL"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class TodoOrder(str, enum.Enum):
    """Sort order for todo lists.

    ``default`` puts open, important and soon-due todos first; ``position``
    follows the manual order within each status.
    """

    DEFAULT = "default"
    POSITION = "position"
