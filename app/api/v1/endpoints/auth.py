"""Signup, login, logout and current-user endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from app.api.deps import (
    get_city_repository,
    get_optional_identity,
    get_session_store,
    get_user_repository,
)
from app.core.session import SessionPayload, SessionStore
from app.models.user import User
from app.repositories import CityRepository, UserRepository
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    SessionUser,
    SignupRequest,
    UserProfile,
)
from app.schemas.catalog import CityRead
from app.services.accounts import authenticate_user, register_user
from app.services.authorization import Identity

router = APIRouter()


def _start_session(store: SessionStore, response: Response, user: User) -> AuthResponse:
    """Issue a fresh session cookie for ``user``; it fully replaces any previous one."""
    store.create(
        response,
        SessionPayload(
            user_id=str(user.id),
            city_id=str(user.city_id),
            email=user.email,
            name=user.display_name,
        ),
    )
    return AuthResponse(
        user=SessionUser(id=user.id, name=user.display_name, email=user.email, city_id=user.city_id)
    )


@router.post("/signup", response_model=AuthResponse)
async def signup(
    payload: SignupRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    cities: CityRepository = Depends(get_city_repository),
    store: SessionStore = Depends(get_session_store),
):
    """Create an account in an active city and sign it in."""
    user = await register_user(users, cities, payload)
    return _start_session(store, response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    store: SessionStore = Depends(get_session_store),
):
    """Exchange email and password for a session cookie."""
    user = await authenticate_user(users, payload)
    return _start_session(store, response, user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, store: SessionStore = Depends(get_session_store)):
    store.destroy(response)
    return LogoutResponse(success=True)


@router.get("/me", response_model=MeResponse)
async def me(
    identity: Identity | None = Depends(get_optional_identity),
    users: UserRepository = Depends(get_user_repository),
):
    """Current user, or ``{"user": null}`` when not signed in."""
    if identity is None:
        return MeResponse(user=None)
    user = await users.get(identity.user_id)
    if user is None:
        return MeResponse(user=None)
    return MeResponse(
        user=UserProfile(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.display_name,
            email=user.email,
            city_id=user.city_id,
            avatar_url=user.avatar_url,
            role=user.role,
            is_verified=user.is_verified,
            rating=user.rating,
            rating_count=user.rating_count,
            created_at=user.created_at,
            updated_at=user.updated_at,
            city=CityRead.model_validate(user.city),
        )
    )
