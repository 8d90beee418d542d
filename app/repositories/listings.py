"""Scoped listing queries.

Every read and write takes either a :class:`CityScope` (public, city-facing
surface) or an :class:`OwnerScope` (the signed-in owner). There is no unscoped
variant. Concurrent updates of the same listing are not serialized: the last
write wins.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.constants import DEFAULT_LISTING_LIMIT, MAX_LISTING_LIMIT
from app.core.enums import ListingStatus
from app.models.listing import Listing, ListingImage

_SCOPE_FIELDS = frozenset({"user_id", "city_id"})


@dataclass(frozen=True)
class CityScope:
    city_id: uuid.UUID

    def clause(self):
        return Listing.city_id == self.city_id


@dataclass(frozen=True)
class OwnerScope:
    """The signed-in owner. Filters by user only; ``city_id`` stamps new listings."""

    user_id: uuid.UUID
    city_id: uuid.UUID

    def clause(self):
        return Listing.user_id == self.user_id


ListingScope = Union[CityScope, OwnerScope]


@dataclass(frozen=True)
class ListingFilters:
    status: ListingStatus = ListingStatus.ACTIVE
    category_id: uuid.UUID | None = None


@dataclass(frozen=True)
class Page:
    limit: int = DEFAULT_LISTING_LIMIT
    offset: int = 0

    @classmethod
    def clamp(cls, limit: int | None, offset: int | None) -> "Page":
        """Cap limit at MAX_LISTING_LIMIT (at least 1) and floor offset at 0."""
        lim = DEFAULT_LISTING_LIMIT if limit is None else limit
        off = 0 if offset is None else offset
        return cls(limit=max(1, min(lim, MAX_LISTING_LIMIT)), offset=max(off, 0))


def _listing_query():
    return select(Listing).options(
        selectinload(Listing.images),
        selectinload(Listing.category),
        selectinload(Listing.user),
    )


def _images(urls: list[str]) -> list[ListingImage]:
    return [ListingImage(url=str(url), position=i) for i, url in enumerate(urls)]


class ListingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_many(
        self,
        scope: ListingScope,
        filters: ListingFilters | None = None,
        page: Page | None = None,
    ) -> list[Listing]:
        filters = filters or ListingFilters()
        page = page or Page()
        stmt = _listing_query().where(scope.clause(), Listing.status == filters.status)
        if filters.category_id:
            stmt = stmt.where(Listing.category_id == filters.category_id)
        stmt = (
            stmt.order_by(Listing.created_at.desc(), Listing.id)
            .offset(page.offset)
            .limit(page.limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_one_by_id_and_scope(self, listing_id: uuid.UUID, scope: ListingScope) -> Listing | None:
        result = await self.db.execute(
            _listing_query().where(Listing.id == listing_id, scope.clause())
        )
        return result.scalar_one_or_none()

    async def create(self, scope: OwnerScope, data: dict[str, Any]) -> Listing:
        """Insert a listing owned by ``scope.user_id`` in ``scope.city_id``."""
        if _SCOPE_FIELDS & data.keys():
            raise ValueError("Owner and city come from the scope, not the payload")
        fields = dict(data)
        urls = fields.pop("images", None) or []
        listing = Listing(user_id=scope.user_id, city_id=scope.city_id, **fields)
        listing.images = _images(urls)
        self.db.add(listing)
        await self.db.flush()
        return await self._reload(listing.id, scope)

    async def update(self, listing_id: uuid.UUID, scope: OwnerScope, changes: dict[str, Any]) -> Listing | None:
        """Apply ``changes`` to a listing inside ``scope``. ``images`` replaces the whole set."""
        if _SCOPE_FIELDS & changes.keys():
            raise ValueError("A listing's owner and city cannot be changed")
        listing = await self.find_one_by_id_and_scope(listing_id, scope)
        if listing is None:
            return None
        fields = dict(changes)
        if "images" in fields:
            listing.images = _images(fields.pop("images") or [])
        for k, v in fields.items():
            setattr(listing, k, v)
        await self.db.flush()
        return await self._reload(listing.id, scope)

    async def delete(self, listing_id: uuid.UUID, scope: OwnerScope) -> bool:
        listing = await self.find_one_by_id_and_scope(listing_id, scope)
        if listing is None:
            return False
        await self.db.delete(listing)
        await self.db.flush()
        return True

    async def _reload(self, listing_id: uuid.UUID, scope: ListingScope) -> Listing:
        # populate_existing so relationships are eagerly (re)loaded for the response.
        result = await self.db.execute(
            _listing_query()
            .where(Listing.id == listing_id, scope.clause())
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
