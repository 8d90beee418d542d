"""Data access. Listing queries always take an explicit scope."""

from app.repositories.catalog import CategoryRepository, CityRepository
from app.repositories.listings import CityScope, ListingFilters, ListingRepository, OwnerScope, Page
from app.repositories.users import UserRepository

__all__ = [
    "CategoryRepository",
    "CityRepository",
    "CityScope",
    "ListingFilters",
    "ListingRepository",
    "OwnerScope",
    "Page",
    "UserRepository",
]
