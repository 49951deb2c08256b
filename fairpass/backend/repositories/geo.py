"""
Country and City Repositories.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from fairpass.backend.models.geo import City, Country
from fairpass.backend.repositories.base import BaseRepository


class CountryRepository(BaseRepository[Country]):
    model = Country
    not_found_message = "Country not found"

    async def list_with_city_counts(self) -> list[tuple[Country, int]]:
        city_count = (
            select(func.count(City.id))
            .where(City.country_id == Country.id)
            .correlate(Country)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(Country, city_count).order_by(Country.name.asc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_with_cities(self, country_id: str) -> Country | None:
        return await self._first(
            select(Country).options(selectinload(Country.cities)).where(Country.id == country_id)
        )

    async def code_taken(self, code: str, exclude_id: str | None = None) -> bool:
        query = select(Country.id).where(Country.code == code)
        if exclude_id:
            query = query.where(Country.id != exclude_id)
        return await self._first(query) is not None


class CityRepository(BaseRepository[City]):
    model = City
    not_found_message = "City not found"

    async def list_cities(self, country_id: str | None = None) -> list[City]:
        query = select(City).join(City.country)
        if country_id:
            query = query.where(City.country_id == country_id)
        return await self._all(query.order_by(Country.name.asc(), City.name.asc()))

    async def list_for_country(self, country_id: str) -> list[City]:
        return await self._all(
            select(City).where(City.country_id == country_id).order_by(City.name.asc())
        )
