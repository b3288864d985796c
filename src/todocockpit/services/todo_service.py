"""Business logic for categories, labels and todos."""

import logging
import re
from datetime import date, datetime, timezone
from typing import Any, Sequence

from pydantic import BaseModel, ValidationError as SchemaValidationError
from sqlalchemy import select, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from todocockpit.config import get_settings
from todocockpit.exceptions import NotFoundError, ReorderError, ValidationError
from todocockpit.models import Todo, TodoStatus, Label, Category, HEX_COLOR_PATTERN
from todocockpit.schemas.category import CategoryPosition
from todocockpit.schemas.todo import (
    TodoCreate,
    TodoUpdate,
    TodoPosition,
    TodoFilter,
    TodoOrder,
)
from todocockpit.services.statistics import TodoStatistics, compute_statistics

logger = logging.getLogger(__name__)


def _require_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid {what} name")
    return value


def _parse_reorder_entries(
    entries: Sequence[Any],
    schema: type[BaseModel],
    noun: str,
    required: str,
) -> list[Any]:
    """Validate a reorder payload before any store access.

    Entries may be schema instances or plain mappings. Duplicated ids are
    rejected because they cannot all be satisfied by one write each.
    """
    if not entries or isinstance(entries, (str, bytes)):
        raise ValidationError(f"Invalid {noun} data")
    try:
        parsed = [
            entry if isinstance(entry, schema) else schema.model_validate(entry)
            for entry in entries
        ]
    except SchemaValidationError:
        raise ValidationError(f"Invalid {noun} format - each {noun} must have {required}")

    ids = [entry.id for entry in parsed]
    if len(set(ids)) != len(ids):
        raise ValidationError(f"Invalid {noun} data - duplicate ids")
    return parsed


class TodoService:
    """Service for todo CRUD and ordering operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(
        self,
        *,
        category_id: str | None = None,
        status: str | None = None,
        is_important: bool | None = None,
        view: TodoFilter = TodoFilter.ALL,
        order: TodoOrder = TodoOrder.DEFAULT,
    ) -> list[Todo]:
        """Get todos with filtering.

        ``category_id=None`` returns todos of every category, an empty string
        returns the inbox (uncategorized todos) and any other value restricts
        to that category.
        """
        query = select(Todo).options(selectinload(Todo.labels))

        if category_id == "":
            query = query.where(Todo.category_id.is_(None))
        elif category_id is not None:
            query = query.where(Todo.category_id == category_id)
        if status is not None:
            query = query.where(Todo.status == status)
        if is_important is not None:
            query = query.where(Todo.is_important == is_important)
        if view == TodoFilter.ACTIVE:
            query = query.where(Todo.status != TodoStatus.DONE)
        elif view == TodoFilter.COMPLETED:
            query = query.where(Todo.status == TodoStatus.DONE)

        if order == TodoOrder.POSITION:
            query = query.order_by(
                Todo.status_rank(),
                Todo.position.asc(),
                Todo.created_at.asc(),
            )
        else:
            query = query.order_by(
                Todo.status_rank(),
                Todo.is_important.desc(),
                Todo.due_date.asc().nullslast(),
                Todo.updated_at.desc(),
            )

        result = await self.db.execute(query)
        return list(result.scalars().unique())

    async def get_by_id(self, todo_id: str) -> Todo | None:
        """Get a single todo by ID with its labels."""
        query = (
            select(Todo)
            .options(selectinload(Todo.labels))
            .where(Todo.id == todo_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _check_category(self, category_id: str) -> None:
        exists = await self.db.scalar(
            select(func.count()).select_from(Category).where(Category.id == category_id)
        )
        if not exists:
            raise NotFoundError("Category not found")

    async def _resolve_labels(self, label_ids: list[str]) -> list[Label]:
        wanted = set(label_ids)
        if not wanted:
            return []
        result = await self.db.execute(select(Label).where(Label.id.in_(wanted)))
        labels = list(result.scalars())
        if len(labels) != len(wanted):
            raise NotFoundError("One or more labels could not be found")
        return labels

    async def _next_position(self, category_id: str | None, status: str) -> int:
        query = select(func.max(Todo.position)).where(Todo.status == status)
        if category_id is None:
            query = query.where(Todo.category_id.is_(None))
        else:
            query = query.where(Todo.category_id == category_id)
        highest = await self.db.scalar(query)
        return 0 if highest is None else highest + 1

    async def create(self, data: TodoCreate) -> Todo:
        """Create a new todo at the end of its (category, status) group."""
        if data.category_id is not None:
            await self._check_category(data.category_id)
        labels = await self._resolve_labels(data.labels)

        todo = Todo(
            title=data.title,
            due_date=data.due_date,
            is_important=data.is_important,
            status=data.status,
            category_id=data.category_id,
            position=await self._next_position(data.category_id, data.status),
            labels=labels,
        )
        self.db.add(todo)
        await self.db.flush()
        logger.info("Created todo %s", todo.id)

        # Reload with all relationships
        return await self.get_by_id(todo.id)

    async def update(self, todo_id: str, data: TodoUpdate) -> Todo | None:
        """Apply the fields present in ``data`` to a todo."""
        todo = await self.get_by_id(todo_id)
        if not todo:
            return None

        update_data = data.model_dump(exclude_unset=True)

        # Handle labels separately
        if "labels" in update_data:
            todo.labels = await self._resolve_labels(update_data.pop("labels"))

        if update_data.get("category_id") is not None:
            await self._check_category(update_data["category_id"])

        # Apply remaining updates
        for key, value in update_data.items():
            setattr(todo, key, value)

        todo.updated_at = datetime.now(timezone.utc)
        await self.db.flush()
        logger.debug("Updated todo %s fields=%s", todo_id, sorted(data.model_fields_set))

        # Reload with all relationships
        return await self.get_by_id(todo_id)

    async def delete(self, todo_id: str) -> bool:
        """Delete a todo."""
        todo = await self.get_by_id(todo_id)
        if not todo:
            return False
        await self.db.delete(todo)
        await self.db.flush()
        logger.info("Deleted todo %s", todo_id)
        return True

    async def reorder(self, entries: Sequence[TodoPosition | dict]) -> list[Todo]:
        """Persist new positions and statuses for a set of todos.

        Either every entry is written or none is: unknown ids abort before
        the first write, and a failing write rolls back the ones before it.
        Returns the affected todos grouped by category and status, in
        position order.
        """
        positions = _parse_reorder_entries(
            entries, TodoPosition, "todo", "an id, position, and status"
        )
        ids = [entry.id for entry in positions]

        matched = await self.db.scalar(
            select(func.count()).select_from(Todo).where(Todo.id.in_(ids))
        )
        if matched < len(ids):
            raise NotFoundError("One or more todos could not be found")

        try:
            for entry in positions:
                await self.db.execute(
                    update(Todo)
                    .where(Todo.id == entry.id)
                    .values(position=entry.position, status=entry.status)
                )
            await self.db.flush()
        except SQLAlchemyError:
            logger.exception("Reorder of %d todos failed, rolling back", len(ids))
            await self.db.rollback()
            raise ReorderError("Failed to reorder todos")

        logger.info("Reordered %d todos", len(ids))
        result = await self.db.execute(
            select(Todo)
            .options(selectinload(Todo.labels))
            .where(Todo.id.in_(ids))
            .order_by(
                Todo.category_id.asc().nullslast(),
                Todo.status_rank(),
                Todo.position.asc(),
            )
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().unique())

    async def get_statistics(
        self,
        *,
        category_id: str | None = None,
        today: date | None = None,
    ) -> TodoStatistics:
        """Compute dashboard statistics for the todos of a view."""
        todos = await self.get_all(category_id=category_id)
        return compute_statistics(todos, today=today)


class CategoryService:
    """Service for category operations."""

    def __init__(self, db: AsyncSession, max_categories: int | None = None):
        self.db = db
        if max_categories is None:
            max_categories = get_settings().max_categories
        self.max_categories = max_categories

    async def get_all(self) -> list[Category]:
        """Get all categories in display order."""
        result = await self.db.execute(
            select(Category).order_by(Category.position.asc(), Category.created_at.asc())
        )
        return list(result.scalars())

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get a category by ID."""
        result = await self.db.execute(
            select(Category).where(Category.id == category_id)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str) -> Category:
        """Create a new category after the last one."""
        _require_name(name, "category")

        count = await self.db.scalar(select(func.count()).select_from(Category))
        if count >= self.max_categories:
            raise ValidationError(
                f"Maximum of {self.max_categories} categories reached"
            )

        highest = await self.db.scalar(select(func.max(Category.position)))
        position = 0 if highest is None else highest + 1

        category = Category(name=name, position=position)
        self.db.add(category)
        await self.db.flush()
        logger.info("Created category %s (%r) at position %d", category.id, name, position)
        return category

    async def update(self, category_id: str, **kwargs) -> Category | None:
        """Rename a category."""
        category = await self.get_by_id(category_id)
        if not category:
            return None
        name = kwargs.get("name")
        if name is not None:
            category.name = _require_name(name, "category")
        await self.db.flush()
        return category

    async def delete(self, category_id: str) -> bool:
        """Delete a category, moving its todos to the inbox.

        Both steps run in the caller's transaction so the todos are never
        observed cleared while the category still exists.
        """
        category = await self.get_by_id(category_id)
        if not category:
            return False
        result = await self.db.execute(
            update(Todo)
            .where(Todo.category_id == category_id)
            .values(category_id=None)
        )
        await self.db.delete(category)
        await self.db.flush()
        logger.info(
            "Deleted category %s, moved %d todos to the inbox",
            category_id,
            result.rowcount,
        )
        return True

    async def reorder(self, entries: Sequence[CategoryPosition | dict]) -> list[Category]:
        """Persist new positions for a set of categories.

        All-or-nothing, like :meth:`TodoService.reorder`. Returns every
        category in the new display order.
        """
        positions = _parse_reorder_entries(
            entries, CategoryPosition, "category", "an id and position"
        )
        ids = [entry.id for entry in positions]

        matched = await self.db.scalar(
            select(func.count()).select_from(Category).where(Category.id.in_(ids))
        )
        if matched < len(ids):
            raise NotFoundError("One or more categories could not be found")

        try:
            for entry in positions:
                await self.db.execute(
                    update(Category)
                    .where(Category.id == entry.id)
                    .values(position=entry.position)
                )
            await self.db.flush()
        except SQLAlchemyError:
            logger.exception("Reorder of %d categories failed, rolling back", len(ids))
            await self.db.rollback()
            raise ReorderError("Failed to reorder categories")

        logger.info("Reordered %d categories", len(ids))
        return await self.get_all()


class LabelService:
    """Service for label operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _check_color(color: Any) -> str:
        if not isinstance(color, str) or not re.fullmatch(HEX_COLOR_PATTERN, color):
            raise ValidationError("Invalid label color")
        return color

    async def get_all(self) -> list[Label]:
        """Get all labels by name."""
        result = await self.db.execute(select(Label).order_by(Label.name))
        return list(result.scalars())

    async def get_by_id(self, label_id: str) -> Label | None:
        """Get a label by ID."""
        result = await self.db.execute(
            select(Label).where(Label.id == label_id)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str, color: str) -> Label:
        """Create a new label."""
        _require_name(name, "label")
        self._check_color(color)
        label = Label(name=name, color=color)
        self.db.add(label)
        await self.db.flush()
        logger.info("Created label %s (%r)", label.id, name)
        return label

    async def update(
        self,
        label_id: str,
        name: str | None = None,
        color: str | None = None,
    ) -> Label | None:
        """Update a label's name or color."""
        if name is not None:
            _require_name(name, "label")
        if color is not None:
            self._check_color(color)

        label = await self.get_by_id(label_id)
        if not label:
            return None
        if name is not None:
            label.name = name
        if color is not None:
            label.color = color
        await self.db.flush()
        return label

    async def delete(self, label_id: str) -> bool:
        """Delete a label after detaching it from every todo holding it."""
        label = await self.get_by_id(label_id)
        if not label:
            return False

        result = await self.db.execute(
            select(Todo)
            .options(selectinload(Todo.labels))
            .join(Todo.labels)
            .where(Label.id == label_id)
        )
        holders = list(result.scalars().unique())
        now = datetime.now(timezone.utc)
        for todo in holders:
            todo.labels = [item for item in todo.labels if item.id != label_id]
            todo.updated_at = now
        await self.db.flush()

        await self.db.delete(label)
        await self.db.flush()
        logger.info("Deleted label %s, detached from %d todos", label_id, len(holders))
        return True
