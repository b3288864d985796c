"""Label API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from todocockpit.api.rate_limit import limiter, default_rate_limit
from todocockpit.database import get_db
from todocockpit.schemas.base import SuccessResponse
from todocockpit.schemas.label import LabelCreate, LabelUpdate, LabelResponse
from todocockpit.services.todo_service import LabelService

router = APIRouter(prefix="/labels", tags=["labels"])


@router.get("", response_model=list[LabelResponse])
async def list_labels(
    db: AsyncSession = Depends(get_db),
):
    """List all labels."""
    service = LabelService(db)
    labels = await service.get_all()
    return [LabelResponse.model_validate(label) for label in labels]


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(default_rate_limit)
async def create_label(
    request: Request,
    data: LabelCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new label."""
    service = LabelService(db)
    label = await service.create(name=data.name, color=data.color)
    return LabelResponse.model_validate(label)


@router.get("/{label_id}", response_model=LabelResponse)
async def get_label(
    label_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a label by ID."""
    service = LabelService(db)
    label = await service.get_by_id(label_id)
    if not label:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Label not found",
        )
    return LabelResponse.model_validate(label)


@router.put("/{label_id}", response_model=LabelResponse)
@limiter.limit(default_rate_limit)
async def update_label(
    request: Request,
    label_id: str,
    data: LabelUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a label's name or color."""
    service = LabelService(db)
    label = await service.update(label_id, name=data.name, color=data.color)
    if not label:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Label not found",
        )
    return LabelResponse.model_validate(label)


@router.delete("/{label_id}", response_model=SuccessResponse)
@limiter.limit(default_rate_limit)
async def delete_label(
    request: Request,
    label_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a label and detach it from every todo."""
    service = LabelService(db)
    deleted = await service.delete(label_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Label not found",
        )
    return SuccessResponse()
