"""Request-scoped dependencies: session store, identity and repositories."""

from __future__ import annotations

import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import AuthenticationError
from app.core.session import SessionPayload, SessionStore
from app.db.session import get_db
from app.repositories import CategoryRepository, CityRepository, ListingRepository, UserRepository
from app.services.authorization import Identity


def get_session_store() -> SessionStore:
    return SessionStore(get_settings().session_policy)


def get_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionPayload | None:
    return store.read(request)


def _identity(payload: SessionPayload) -> Identity | None:
    try:
        return Identity(
            user_id=uuid.UUID(payload.user_id),
            city_id=uuid.UUID(payload.city_id),
            name=payload.name,
            email=payload.email,
        )
    except ValueError:
        return None


def get_optional_identity(session: SessionPayload | None = Depends(get_session)) -> Identity | None:
    return _identity(session) if session else None


def require_identity(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise AuthenticationError()
    return identity


def get_listing_repository(db: AsyncSession = Depends(get_db)) -> ListingRepository:
    return ListingRepository(db)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_city_repository(db: AsyncSession = Depends(get_db)) -> CityRepository:
    return CityRepository(db)


def get_category_repository(db: AsyncSession = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)
