"""
Countries and Cities API Endpoints.
"""

from fastapi import APIRouter, Query

from fairpass.backend.core.dependencies import DbSession, SuperAdmin
from fairpass.backend.integrations.ai import CityContent
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.geo import (
    CityContentRequest,
    CityCreate,
    CityResponse,
    CitySummary,
    CityUpdate,
    CountryCreate,
    CountryDetail,
    CountryListItem,
    CountryResponse,
    CountryUpdate,
)
from fairpass.backend.services.geo import GeoService

router = APIRouter()


# =============================================================================
# Countries
# =============================================================================


@router.get(
    "/countries",
    response_model=ApiResponse[list[CountryListItem]],
    summary="List countries",
)
async def list_countries(db: DbSession, admin: SuperAdmin) -> ApiResponse[list[CountryListItem]]:
    return ApiResponse(data=await GeoService(db).list_countries())


@router.post(
    "/countries",
    response_model=ApiResponse[CountryResponse],
    status_code=201,
    summary="Create a country",
)
async def create_country(
    data: CountryCreate,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[CountryResponse]:
    country = await GeoService(db).create_country(data)
    return ApiResponse(data=CountryResponse.model_validate(country))


@router.get(
    "/countries/{country_id}",
    response_model=ApiResponse[CountryDetail],
    summary="Get a country with its cities",
)
async def get_country(country_id: str, db: DbSession, admin: SuperAdmin) -> ApiResponse[CountryDetail]:
    country = await GeoService(db).get_country(country_id)
    return ApiResponse(data=CountryDetail.model_validate(country))


@router.patch(
    "/countries/{country_id}",
    response_model=ApiResponse[CountryResponse],
    summary="Update a country",
)
async def update_country(
    country_id: str,
    data: CountryUpdate,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[CountryResponse]:
    country = await GeoService(db).update_country(country_id, data)
    return ApiResponse(data=CountryResponse.model_validate(country))


@router.delete("/countries/{country_id}", status_code=204, summary="Delete a country")
async def delete_country(country_id: str, db: DbSession, admin: SuperAdmin) -> None:
    await GeoService(db).delete_country(country_id)


@router.get(
    "/countries/{country_id}/cities",
    response_model=ApiResponse[list[CitySummary]],
    summary="Cities of a country",
)
async def list_country_cities(
    country_id: str,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[list[CitySummary]]:
    cities = await GeoService(db).list_cities_for_country(country_id)
    return ApiResponse(data=[CitySummary.model_validate(c) for c in cities])


# =============================================================================
# Cities
# =============================================================================


@router.get("/cities", response_model=ApiResponse[list[CityResponse]], summary="List cities")
async def list_cities(
    db: DbSession,
    admin: SuperAdmin,
    country_id: str | None = Query(default=None),
) -> ApiResponse[list[CityResponse]]:
    cities = await GeoService(db).list_cities(country_id)
    return ApiResponse(data=[CityResponse.model_validate(c) for c in cities])


@router.post(
    "/cities",
    response_model=ApiResponse[CityResponse],
    status_code=201,
    summary="Create a city",
)
async def create_city(data: CityCreate, db: DbSession, admin: SuperAdmin) -> ApiResponse[CityResponse]:
    city = await GeoService(db).create_city(data)
    return ApiResponse(data=CityResponse.model_validate(city))


@router.post(
    "/cities/generate-content",
    response_model=ApiResponse[CityContent],
    summary="Draft a city guide with AI",
)
async def generate_city_content(
    data: CityContentRequest,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[CityContent]:
    return ApiResponse(data=await GeoService(db).generate_city_content(data.city, data.country))


@router.get("/cities/{city_id}", response_model=ApiResponse[CityResponse], summary="Get a city")
async def get_city(city_id: str, db: DbSession, admin: SuperAdmin) -> ApiResponse[CityResponse]:
    city = await GeoService(db).get_city(city_id)
    return ApiResponse(data=CityResponse.model_validate(city))


@router.patch(
    "/cities/{city_id}",
    response_model=ApiResponse[CityResponse],
    summary="Update a city",
)
async def update_city(
    city_id: str,
    data: CityUpdate,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[CityResponse]:
    city = await GeoService(db).update_city(city_id, data)
    return ApiResponse(data=CityResponse.model_validate(city))


@router.delete("/cities/{city_id}", status_code=204, summary="Delete a city")
async def delete_city(city_id: str, db: DbSession, admin: SuperAdmin) -> None:
    await GeoService(db).delete_city(city_id)
