from typing import List

from fastapi import APIRouter

from ..deps import LocationClientDep
from ..schemas import Location

locations_router = APIRouter(prefix="/api/locations", tags=["locations"])


@locations_router.get("/countries", response_model=List[Location])
async def list_countries(locations: LocationClientDep):
    return await locations.list_countries()


@locations_router.get("/countries/{country_id}/states", response_model=List[Location])
async def list_states(country_id: str, locations: LocationClientDep):
    return await locations.list_states(country_id)


@locations_router.get("/countries/{country_id}/states/{state_id}/cities", response_model=List[Location])
async def list_cities(country_id: str, state_id: str, locations: LocationClientDep):
    return await locations.list_cities(country_id, state_id)
