"""City and Category schemas."""

from uuid import UUID

from app.schemas.common import CamelModel


class CityRead(CamelModel):
    id: UUID
    name: str
    slug: str


class CategoryRead(CamelModel):
    id: UUID
    name: str
    slug: str
