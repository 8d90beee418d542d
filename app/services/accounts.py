"""Signup and login."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.security import hash_password, verify_password, verify_password_dummy
from app.models.user import User
from app.repositories.catalog import CityRepository
from app.repositories.users import UserRepository
from app.schemas.auth import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


async def register_user(users: UserRepository, cities: CityRepository, data: SignupRequest) -> User:
    """Create an account. ``data.phone`` is already digits-only."""
    if await users.get_by_email(data.email):
        raise ConflictError("An account with this email already exists", details={"email": ["Already registered"]})
    if await users.get_by_phone(data.phone):
        raise ConflictError(
            "An account with this phone number already exists", details={"phone": ["Already registered"]}
        )
    if await cities.get_active(data.city_id) is None:
        raise ValidationError("Invalid city selected", details={"cityId": ["Unknown or inactive city"]})

    password_hash = await run_in_threadpool(hash_password, data.password)
    try:
        user = await users.create(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            password_hash=password_hash,
            city_id=data.city_id,
        )
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email or phone.
        raise ConflictError("An account with this email or phone number already exists")
    logger.info("Registered user %s in city %s", user.id, user.city_id)
    return user


async def authenticate_user(users: UserRepository, data: LoginRequest) -> User:
    """Return the user for valid credentials; otherwise one generic AuthenticationError."""
    user = await users.get_by_email(data.email)
    if user is None or not user.password_hash:
        await run_in_threadpool(verify_password_dummy, data.password)
        logger.info("Rejected login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not await run_in_threadpool(verify_password, data.password, user.password_hash):
        logger.info("Rejected login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user
