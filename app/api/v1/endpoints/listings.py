"""Public, city-scoped listing endpoints.

Every request must carry ``cityId``; listings are never returned without a city.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_listing_repository
from app.core.constants import DEFAULT_LISTING_LIMIT
from app.core.enums import ListingStatus
from app.core.errors import NotFoundOrForbidden
from app.repositories import ListingFilters, ListingRepository, Page
from app.schemas.listing import ListingRead
from app.services.authorization import require_city_scope

router = APIRouter()


@router.get("", response_model=list[ListingRead])
async def list_listings(
    city_id: uuid.UUID | None = Query(None, alias="cityId"),
    category_id: uuid.UUID | None = Query(None, alias="categoryId"),
    status: ListingStatus = ListingStatus.ACTIVE,
    limit: int = DEFAULT_LISTING_LIMIT,
    offset: int = 0,
    repo: ListingRepository = Depends(get_listing_repository),
):
    """Listings in one city (limit capped at 50, offset floored at 0)."""
    scope = require_city_scope(city_id)
    return await repo.find_many(
        scope,
        ListingFilters(status=status, category_id=category_id),
        Page.clamp(limit, offset),
    )


@router.get("/{listing_id}", response_model=ListingRead)
async def get_listing(
    listing_id: uuid.UUID,
    city_id: uuid.UUID | None = Query(None, alias="cityId"),
    repo: ListingRepository = Depends(get_listing_repository),
):
    """A single listing, only if it belongs to the given city."""
    scope = require_city_scope(city_id)
    listing = await repo.find_one_by_id_and_scope(listing_id, scope)
    if not listing:
        raise NotFoundOrForbidden("Listing not found or does not belong to this city")
    return listing
