"""Label model for colored tagging of todos."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from todocockpit.models.base import Base


# Hex color like #3b82f6
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class Label(Base):
    """Label attached to any number of todos."""

    __tablename__ = "labels"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Label(name={self.name!r}, color={self.color!r})>"
