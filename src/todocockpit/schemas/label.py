"""Label schemas."""

from datetime import datetime

from pydantic import Field

from todocockpit.models.label import HEX_COLOR_PATTERN
from todocockpit.schemas.base import BaseSchema


class LabelCreate(BaseSchema):
    """Schema for creating a label."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)


class LabelUpdate(BaseSchema):
    """Schema for updating a label."""

    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)


class LabelResponse(BaseSchema):
    """Schema for label responses."""

    id: str
    name: str
    color: str
    created_at: datetime
