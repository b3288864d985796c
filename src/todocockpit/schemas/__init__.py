"""Pydantic schemas for ToDo Cockpit API."""

from todocockpit.schemas.base import SuccessResponse
from todocockpit.schemas.todo import (
    TodoCreate,
    TodoUpdate,
    TodoResponse,
    TodoPosition,
    TodoReorderRequest,
    TodoStatisticsResponse,
    TodoFilter,
    TodoOrder,
)
from todocockpit.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryPosition,
    CategoryReorderRequest,
)
from todocockpit.schemas.label import LabelCreate, LabelUpdate, LabelResponse

__all__ = [
    "SuccessResponse",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "TodoPosition",
    "TodoReorderRequest",
    "TodoStatisticsResponse",
    "TodoFilter",
    "TodoOrder",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryPosition",
    "CategoryReorderRequest",
    "LabelCreate",
    "LabelUpdate",
    "LabelResponse",
]
