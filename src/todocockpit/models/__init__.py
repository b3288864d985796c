"""SQLAlchemy models for ToDo Cockpit."""

from todocockpit.models.base import Base
from todocockpit.models.todo import Todo, TodoLabel, TodoStatus, STATUS_ORDER
from todocockpit.models.category import Category
from todocockpit.models.label import Label, HEX_COLOR_PATTERN

__all__ = [
    "Base",
    "Todo",
    "TodoLabel",
    "TodoStatus",
    "STATUS_ORDER",
    "Category",
    "Label",
    "HEX_COLOR_PATTERN",
]
