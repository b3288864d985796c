"""API router aggregation."""

from fastapi import APIRouter

from todocockpit.api.todos import router as todos_router
from todocockpit.api.categories import router as categories_router
from todocockpit.api.labels import router as labels_router

router = APIRouter(prefix="/api")

router.include_router(todos_router)
router.include_router(categories_router)
router.include_router(labels_router)
