"""City and ownership scoping for listing access.

Public reads must name a city. Owned reads and writes are filtered by the
signed-in user, and a listing owned by someone else is reported exactly like a
missing one. Before a write, the owned listing's city must also match the
caller's city; a mismatch means the stored data is inconsistent and the write is
aborted.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from app.core.errors import NotFoundOrForbidden, ScopeIntegrityError, ScopeRequiredError
from app.models.listing import Listing
from app.repositories.listings import CityScope, ListingRepository, OwnerScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, resolved from a verified session."""

    user_id: uuid.UUID
    city_id: uuid.UUID
    name: str
    email: str | None = None

    @property
    def owner_scope(self) -> OwnerScope:
        return OwnerScope(user_id=self.user_id, city_id=self.city_id)


def require_city_scope(city_id: uuid.UUID | None) -> CityScope:
    if city_id is None:
        raise ScopeRequiredError()
    return CityScope(city_id=city_id)


async def get_owned_listing(repo: ListingRepository, listing_id: uuid.UUID, identity: Identity) -> Listing:
    listing = await repo.find_one_by_id_and_scope(listing_id, identity.owner_scope)
    if listing is None:
        raise NotFoundOrForbidden("Listing not found")
    return listing


def ensure_listing_in_scope(listing: Listing, identity: Identity) -> None:
    """Raise ScopeIntegrityError when an owned listing sits in another city."""
    if listing.city_id != identity.city_id:
        logger.error(
            "Listing %s owned by user %s is in city %s but the session is scoped to city %s",
            listing.id,
            identity.user_id,
            listing.city_id,
            identity.city_id,
        )
        raise ScopeIntegrityError()


async def authorize_listing_write(repo: ListingRepository, listing_id: uuid.UUID, identity: Identity) -> Listing:
    """Ownership first, then city. Returns the listing when both hold."""
    listing = await get_owned_listing(repo, listing_id, identity)
    ensure_listing_in_scope(listing, identity)
    return listing
