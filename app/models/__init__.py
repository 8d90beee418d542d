"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.city import Category, City
from app.models.listing import Listing, ListingImage
from app.models.user import User

__all__ = [
    "Category",
    "City",
    "Listing",
    "ListingImage",
    "User",
]
