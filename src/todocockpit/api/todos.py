"""Todo API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from todocockpit.api.rate_limit import limiter, default_rate_limit
from todocockpit.database import get_db
from todocockpit.models import TodoStatus
from todocockpit.schemas.base import SuccessResponse
from todocockpit.schemas.todo import (
    TodoCreate,
    TodoUpdate,
    TodoResponse,
    TodoReorderRequest,
    TodoStatisticsResponse,
    TodoFilter,
    TodoOrder,
)
from todocockpit.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    category_id: str | None = Query(None, alias="categoryId"),
    todo_status: TodoStatus | None = Query(None, alias="status"),
    is_important: bool | None = Query(None, alias="isImportant"),
    view: TodoFilter = Query(TodoFilter.ALL, alias="filter"),
    order: TodoOrder = Query(TodoOrder.DEFAULT),
    db: AsyncSession = Depends(get_db),
):
    """List todos with optional filtering.

    Omitting ``categoryId`` lists every todo; an empty ``categoryId`` lists
    the inbox.
    """
    service = TodoService(db)
    todos = await service.get_all(
        category_id=category_id,
        status=todo_status,
        is_important=is_important,
        view=view,
        order=order,
    )
    return [TodoResponse.model_validate(t) for t in todos]


@router.get("/all", response_model=list[TodoResponse])
async def list_all_todos(
    db: AsyncSession = Depends(get_db),
):
    """List every todo regardless of category."""
    service = TodoService(db)
    todos = await service.get_all()
    return [TodoResponse.model_validate(t) for t in todos]


@router.get("/stats", response_model=TodoStatisticsResponse)
async def todo_statistics(
    category_id: str | None = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_db),
):
    """Aggregate counts for the todos of a view."""
    service = TodoService(db)
    stats = await service.get_statistics(category_id=category_id)
    return TodoStatisticsResponse(**stats.as_dict())


@router.post("/reorder", response_model=list[TodoResponse])
@limiter.limit(default_rate_limit)
async def reorder_todos(
    request: Request,
    data: TodoReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    """Persist new positions and statuses for a set of todos."""
    service = TodoService(db)
    todos = await service.reorder(data.todos)
    return [TodoResponse.model_validate(t) for t in todos]


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(default_rate_limit)
async def create_todo(
    request: Request,
    data: TodoCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new todo."""
    service = TodoService(db)
    todo = await service.create(data)
    return TodoResponse.model_validate(todo)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a single todo by ID."""
    service = TodoService(db)
    todo = await service.get_by_id(todo_id)
    if not todo:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return TodoResponse.model_validate(todo)


async def _update_todo_impl(
    todo_id: str,
    data: TodoUpdate,
    db: AsyncSession,
) -> TodoResponse:
    """Shared implementation for PUT and PATCH todo updates."""
    service = TodoService(db)
    todo = await service.update(todo_id, data)
    if not todo:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return TodoResponse.model_validate(todo)


@router.put("/{todo_id}", response_model=TodoResponse)
@limiter.limit(default_rate_limit)
async def update_todo(
    request: Request,
    todo_id: str,
    data: TodoUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a todo (only the fields sent are modified)."""
    return await _update_todo_impl(todo_id, data, db)


@router.patch("/{todo_id}", response_model=TodoResponse)
@limiter.limit(default_rate_limit)
async def patch_todo(
    request: Request,
    todo_id: str,
    data: TodoUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partially update a todo."""
    return await _update_todo_impl(todo_id, data, db)


@router.delete("/{todo_id}", response_model=SuccessResponse)
@limiter.limit(default_rate_limit)
async def delete_todo(
    request: Request,
    todo_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a todo."""
    service = TodoService(db)
    deleted = await service.delete(todo_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return SuccessResponse()
