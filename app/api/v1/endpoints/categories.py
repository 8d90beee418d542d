"""Category endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_category_repository
from app.repositories import CategoryRepository
from app.schemas.catalog import CategoryRead

router = APIRouter()


@router.get("", response_model=list[CategoryRead])
async def list_categories(categories: CategoryRepository = Depends(get_category_repository)):
    return await categories.list_all()
