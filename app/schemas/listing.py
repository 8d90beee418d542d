"""Listing schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, HttpUrl

from app.core.constants import MAX_IMAGES_PER_LISTING
from app.core.enums import Condition, ListingStatus
from app.schemas.catalog import CategoryRead
from app.schemas.common import CamelModel


class ListingImageRead(CamelModel):
    id: UUID
    url: str
    position: int


class SellerRead(CamelModel):
    """Public part of the owner's profile, embedded in listing responses."""

    id: UUID
    first_name: str
    last_name: str
    avatar_url: str | None = None
    rating: float
    rating_count: int


class ListingCreate(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(default="", max_length=5000)
    price: float = Field(..., ge=0, le=9_999_999_999)
    negotiable: bool = False
    condition: Condition
    status: ListingStatus = ListingStatus.ACTIVE
    category_id: UUID
    images: list[HttpUrl] = Field(default_factory=list, max_length=MAX_IMAGES_PER_LISTING)


class ListingUpdate(CamelModel):
    """Partial update. Owner and city are not part of the contract and cannot be changed."""

    title: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price: float | None = Field(None, ge=0, le=9_999_999_999)
    negotiable: bool | None = None
    condition: Condition | None = None
    status: ListingStatus | None = None
    category_id: UUID | None = None
    images: list[HttpUrl] | None = Field(None, max_length=MAX_IMAGES_PER_LISTING)


class ListingRead(CamelModel):
    id: UUID
    title: str
    description: str
    price: float
    negotiable: bool
    condition: Condition
    status: ListingStatus
    category_id: UUID
    user_id: UUID
    city_id: UUID
    created_at: datetime
    updated_at: datetime
    images: list[ListingImageRead] = []
    category: CategoryRead | None = None
    user: SellerRead | None = None
