"""Owned-listing endpoints for the signed-in user.

Lookups are filtered by the session's user, so someone else's listing is a 404.
Updates and deletes additionally require the listing's city to match the
session's city. Concurrent updates to one listing are last-write-wins.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps import (
    get_category_repository,
    get_listing_repository,
    get_user_repository,
    require_identity,
)
from app.core.constants import DEFAULT_LISTING_LIMIT
from app.core.enums import ListingStatus
from app.core.errors import AuthenticationError, NotFoundOrForbidden, ValidationError
from app.repositories import (
    CategoryRepository,
    ListingFilters,
    ListingRepository,
    OwnerScope,
    Page,
    UserRepository,
)
from app.schemas.listing import ListingCreate, ListingRead, ListingUpdate
from app.services.authorization import Identity, authorize_listing_write, get_owned_listing

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_category(categories: CategoryRepository, category_id: uuid.UUID) -> None:
    if await categories.get(category_id) is None:
        raise ValidationError(details={"categoryId": ["Unknown category"]})


@router.get("", response_model=list[ListingRead])
async def list_my_listings(
    status: ListingStatus = ListingStatus.ACTIVE,
    category_id: uuid.UUID | None = Query(None, alias="categoryId"),
    limit: int = DEFAULT_LISTING_LIMIT,
    offset: int = 0,
    identity: Identity = Depends(require_identity),
    repo: ListingRepository = Depends(get_listing_repository),
):
    return await repo.find_many(
        identity.owner_scope,
        ListingFilters(status=status, category_id=category_id),
        Page.clamp(limit, offset),
    )


@router.post("", response_model=ListingRead, status_code=201)
async def create_my_listing(
    payload: ListingCreate,
    identity: Identity = Depends(require_identity),
    repo: ListingRepository = Depends(get_listing_repository),
    users: UserRepository = Depends(get_user_repository),
    categories: CategoryRepository = Depends(get_category_repository),
):
    """Create a listing in the owner's current city."""
    user = await users.get(identity.user_id)
    if user is None:
        raise AuthenticationError()
    await _check_category(categories, payload.category_id)
    data = payload.model_dump()
    data["images"] = [str(u) for u in payload.images]
    listing = await repo.create(OwnerScope(user_id=user.id, city_id=user.city_id), data)
    logger.info("User %s created listing %s in city %s", user.id, listing.id, listing.city_id)
    return listing


@router.get("/{listing_id}", response_model=ListingRead)
async def get_my_listing(
    listing_id: uuid.UUID,
    identity: Identity = Depends(require_identity),
    repo: ListingRepository = Depends(get_listing_repository),
):
    return await get_owned_listing(repo, listing_id, identity)


@router.patch("/{listing_id}", response_model=ListingRead)
async def update_my_listing(
    listing_id: uuid.UUID,
    payload: ListingUpdate,
    identity: Identity = Depends(require_identity),
    repo: ListingRepository = Depends(get_listing_repository),
    categories: CategoryRepository = Depends(get_category_repository),
):
    """Partial update. Owner and city are fixed; fields sent as null are ignored."""
    await authorize_listing_write(repo, listing_id, identity)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "category_id" in changes:
        await _check_category(categories, changes["category_id"])
    if "images" in changes:
        changes["images"] = [str(u) for u in changes["images"]]
    listing = await repo.update(listing_id, identity.owner_scope, changes)
    if listing is None:
        raise NotFoundOrForbidden("Listing not found")
    return listing


@router.delete("/{listing_id}", status_code=204)
async def delete_my_listing(
    listing_id: uuid.UUID,
    identity: Identity = Depends(require_identity),
    repo: ListingRepository = Depends(get_listing_repository),
):
    await authorize_listing_write(repo, listing_id, identity)
    if not await repo.delete(listing_id, identity.owner_scope):
        raise NotFoundOrForbidden("Listing not found")
    return Response(status_code=204)
