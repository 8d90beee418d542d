"""City lookup endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_city_repository
from app.core.errors import NotFoundOrForbidden
from app.repositories import CityRepository
from app.schemas.catalog import CityRead

router = APIRouter()


@router.get("", response_model=list[CityRead])
async def list_cities(cities: CityRepository = Depends(get_city_repository)):
    """Active cities, ordered by name."""
    return await cities.list_active()


@router.get("/{slug}", response_model=CityRead)
async def get_city(slug: str, cities: CityRepository = Depends(get_city_repository)):
    """Resolve a URL slug (e.g. calbayog-city) to a city id for listing queries."""
    city = await cities.get_active_by_slug(slug)
    if not city:
        raise NotFoundOrForbidden("City not found")
    return city
