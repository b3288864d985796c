"""Category API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from todocockpit.api.rate_limit import limiter, default_rate_limit
from todocockpit.database import get_db
from todocockpit.schemas.base import SuccessResponse
from todocockpit.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryReorderRequest,
)
from todocockpit.services.todo_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    db: AsyncSession = Depends(get_db),
):
    """List all categories in display order."""
    service = CategoryService(db)
    categories = await service.get_all()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(default_rate_limit)
async def create_category(
    request: Request,
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new category after the existing ones."""
    service = CategoryService(db)
    category = await service.create(name=data.name)
    return CategoryResponse.model_validate(category)


@router.post("/reorder", response_model=list[CategoryResponse])
@limiter.limit(default_rate_limit)
async def reorder_categories(
    request: Request,
    data: CategoryReorderRequest,
    db: AsyncSession = Depends(get_db),
):
    """Persist a new category order; returns every category in that order."""
    service = CategoryService(db)
    categories = await service.reorder(data.categories)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a category by ID."""
    service = CategoryService(db)
    category = await service.get_by_id(category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
@limiter.limit(default_rate_limit)
async def update_category(
    request: Request,
    category_id: str,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename a category."""
    service = CategoryService(db)
    update_data = data.model_dump(exclude_unset=True)
    category = await service.update(category_id, **update_data)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=SuccessResponse)
@limiter.limit(default_rate_limit)
async def delete_category(
    request: Request,
    category_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a category; its todos move to the inbox."""
    service = CategoryService(db)
    deleted = await service.delete(category_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return SuccessResponse()
