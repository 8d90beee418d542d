"""Reference data: cities and categories."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.city import Category, City


class CityRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active(self) -> list[City]:
        result = await self.db.execute(
            select(City).where(City.is_active.is_(True)).order_by(City.name)
        )
        return list(result.scalars().all())

    async def get_active(self, city_id: uuid.UUID) -> City | None:
        result = await self.db.execute(
            select(City).where(City.id == city_id, City.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def get_active_by_slug(self, slug: str) -> City | None:
        result = await self.db.execute(
            select(City).where(City.slug == slug, City.is_active.is_(True))
        )
        return result.scalar_one_or_none()


class CategoryRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get(self, category_id: uuid.UUID) -> Category | None:
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()
