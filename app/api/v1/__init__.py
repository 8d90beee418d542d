"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    categories,
    cities,
    health,
    listings,
    user_listings,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(cities.router, prefix="/cities", tags=["cities"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(listings.router, prefix="/listings", tags=["listings"])
api_router.include_router(user_listings.router, prefix="/user/listings", tags=["user-listings"])
