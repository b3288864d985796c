"""Category schemas."""

from datetime import datetime

from pydantic import Field, StrictInt, StrictStr

from todocockpit.schemas.base import BaseSchema


class CategoryCreate(BaseSchema):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(BaseSchema):
    """Schema for renaming a category."""

    name: str | None = Field(None, min_length=1, max_length=100)


class CategoryResponse(BaseSchema):
    """Schema for category responses."""

    id: str
    name: str
    position: int
    created_at: datetime


class CategoryPosition(BaseSchema):
    """One entry of a category reorder request."""

    id: StrictStr
    position: StrictInt


class CategoryReorderRequest(BaseSchema):
    """Schema for ``POST /categories/reorder``."""

    categories: list[CategoryPosition] = Field(..., min_length=1)
