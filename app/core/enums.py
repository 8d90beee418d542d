"""Shared enums for models and API."""

from enum import Enum


class Condition(str, Enum):
    """Physical condition of a listed item."""

    NEW = "NEW"
    USED = "USED"


class ListingStatus(str, Enum):
    """Lifecycle of a listing. Public reads default to ACTIVE."""

    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    EXPIRED = "EXPIRED"
    REMOVED = "REMOVED"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
