"""
Geo Service.

Countries and cities used for event locations and city guides.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import ConflictError, NotFoundError
from fairpass.backend.integrations import ai
from fairpass.backend.models.geo import City, Country
from fairpass.backend.repositories.geo import CityRepository, CountryRepository
from fairpass.backend.schemas.geo import (
    CityCreate,
    CityUpdate,
    CountryCreate,
    CountryListItem,
    CountryResponse,
    CountryUpdate,
)
from fairpass.backend.services.base import BaseService

CODE_TAKEN = "Country code already exists"


class GeoService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.countries = CountryRepository(session)
        self.cities = CityRepository(session)

    # -------------------------------------------------------------------------
    # Countries
    # -------------------------------------------------------------------------

    async def list_countries(self) -> list[CountryListItem]:
        rows = await self.countries.list_with_city_counts()
        return [
            CountryListItem(**CountryResponse.model_validate(country).model_dump(), city_count=count)
            for country, count in rows
        ]

    async def get_country(self, country_id: str) -> Country:
        """Country with its cities ordered by name."""
        country = await self.countries.get_with_cities(country_id)
        if country is None:
            raise NotFoundError("Country not found")
        return country

    async def create_country(self, data: CountryCreate) -> Country:
        if await self.countries.code_taken(data.code):
            raise ConflictError(CODE_TAKEN)

        self._log_operation("Creating country", code=data.code)
        return await self._execute_db_operation(
            "create_country",
            self.countries.create(**data.model_dump()),
            conflict_message=CODE_TAKEN,
        )

    async def update_country(self, country_id: str, data: CountryUpdate) -> Country:
        country = await self.countries.get_by_id(country_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("code") and await self.countries.code_taken(
            update_data["code"], exclude_id=country_id
        ):
            raise ConflictError(CODE_TAKEN)

        return await self._execute_db_operation(
            "update_country",
            self.countries.apply(country, **update_data),
            conflict_message=CODE_TAKEN,
        )

    async def delete_country(self, country_id: str) -> None:
        """Delete a country and its cities."""
        self._log_operation("Deleting country", country_id=country_id)
        await self._execute_db_operation("delete_country", self.countries.delete(country_id))

    # -------------------------------------------------------------------------
    # Cities
    # -------------------------------------------------------------------------

    async def list_cities(self, country_id: str | None = None) -> list[City]:
        return await self.cities.list_cities(country_id)

    async def list_cities_for_country(self, country_id: str) -> list[City]:
        await self.countries.get_by_id(country_id)
        return await self.cities.list_for_country(country_id)

    async def get_city(self, city_id: str) -> City:
        return await self.cities.get_by_id(city_id)

    async def create_city(self, data: CityCreate) -> City:
        await self.countries.get_by_id(data.country_id)

        self._log_operation("Creating city", name=data.name, country_id=data.country_id)
        city = await self._execute_db_operation(
            "create_city",
            self.cities.create(**data.model_dump()),
        )
        # Reload so the country relationship is populated
        return await self.cities.get_by_id(city.id)

    async def update_city(self, city_id: str, data: CityUpdate) -> City:
        city = await self.cities.get_by_id(city_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("country_id"):
            await self.countries.get_by_id(update_data["country_id"])

        await self._execute_db_operation("update_city", self.cities.apply(city, **update_data))
        await self.session.refresh(city, ["country"])
        return city

    async def delete_city(self, city_id: str) -> None:
        self._log_operation("Deleting city", city_id=city_id)
        await self._execute_db_operation("delete_city", self.cities.delete(city_id))

    async def generate_city_content(self, city: str, country: str) -> ai.CityContent:
        self._log_operation("Generating city content", city=city, country=country)
        return await ai.generate_city_content(city, country)
