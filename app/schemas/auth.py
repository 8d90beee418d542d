"""Signup, login and current-user schemas."""

from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.constants import MIN_PASSWORD_LENGTH, MIN_PHONE_DIGITS
from app.core.enums import UserRole
from app.core.security import password_problem
from app.schemas.catalog import CityRead
from app.schemas.common import CamelModel

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: str) -> str:
    """Strip everything but digits so "0917-123 4567" and "09171234567" compare equal."""
    return _NON_DIGITS.sub("", value or "")


def normalize_email(value: str) -> str:
    return value.strip().lower()


class SignupRequest(CamelModel):
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    city_id: UUID

    @field_validator("first_name", "last_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("phone")
    @classmethod
    def _normalize_phone(cls, v: str) -> str:
        digits = normalize_phone(v)
        if len(digits) < MIN_PHONE_DIGITS:
            raise ValueError("Please enter a valid phone number")
        return digits

    @field_validator("password")
    @classmethod
    def _hashable_password(cls, v: str) -> str:
        problem = password_problem(v)
        if problem:
            raise ValueError(problem)
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def _no_nul(cls, v: str) -> str:
        if "\x00" in v:
            raise ValueError("must not contain NUL characters")
        return v


class SessionUser(CamelModel):
    """Identity summary returned by signup and login."""

    id: UUID
    name: str
    email: str | None = None
    city_id: UUID


class AuthResponse(CamelModel):
    user: SessionUser


class UserProfile(CamelModel):
    id: UUID
    first_name: str
    last_name: str
    name: str
    email: str | None = None
    city_id: UUID
    avatar_url: str | None = None
    role: UserRole
    is_verified: bool
    rating: float
    rating_count: int
    created_at: datetime
    updated_at: datetime
    city: CityRead


class MeResponse(CamelModel):
    user: UserProfile | None = None


class LogoutResponse(CamelModel):
    success: bool = True
