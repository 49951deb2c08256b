"""
Unit Tests for GeoService.
"""

from unittest.mock import AsyncMock, patch

import pytest

from fairpass.backend.core.exceptions import ConflictError, NotFoundError
from fairpass.backend.integrations.ai import CityContent
from fairpass.backend.schemas.geo import CityCreate, CityUpdate, CountryCreate, CountryUpdate
from fairpass.backend.services.geo import GeoService


async def _country(service: GeoService, name: str = "Turkey", code: str = "tr"):
    return await service.create_country(CountryCreate(name=name, code=code, timezone="Europe/Istanbul"))


class TestCountries:
    @pytest.mark.asyncio
    async def test_code_stored_upper_case(self, db_session):
        country = await _country(GeoService(db_session))

        assert country.code == "TR"

    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(self, db_session):
        service = GeoService(db_session)
        await _country(service)

        with pytest.raises(ConflictError, match="Country code already exists"):
            await _country(service, name="Türkiye", code="TR")

    @pytest.mark.asyncio
    async def test_update_to_taken_code_conflicts(self, db_session):
        service = GeoService(db_session)
        await _country(service)
        egypt = await _country(service, name="Egypt", code="EG")

        with pytest.raises(ConflictError):
            await service.update_country(egypt.id, CountryUpdate(code="TR"))

    @pytest.mark.asyncio
    async def test_list_includes_city_counts(self, db_session):
        """Should order countries by name and count their cities."""
        service = GeoService(db_session)
        turkey = await _country(service)
        await _country(service, name="Egypt", code="EG")
        await service.create_city(CityCreate(country_id=turkey.id, name="Istanbul"))
        await service.create_city(CityCreate(country_id=turkey.id, name="Ankara"))

        items = await service.list_countries()

        assert [(item.name, item.city_count) for item in items] == [("Egypt", 0), ("Turkey", 2)]

    @pytest.mark.asyncio
    async def test_get_missing_country(self, db_session):
        with pytest.raises(NotFoundError, match="Country not found"):
            await GeoService(db_session).get_country("missing")

    @pytest.mark.asyncio
    async def test_delete_removes_cities(self, db_session):
        service = GeoService(db_session)
        turkey = await _country(service)
        await service.create_city(CityCreate(country_id=turkey.id, name="Istanbul"))

        await service.delete_country(turkey.id)

        assert await service.list_cities() == []


class TestCities:
    @pytest.mark.asyncio
    async def test_create_requires_country(self, db_session):
        with pytest.raises(NotFoundError, match="Country not found"):
            await GeoService(db_session).create_city(CityCreate(country_id="missing", name="Atlantis"))

    @pytest.mark.asyncio
    async def test_create_loads_country(self, db_session):
        service = GeoService(db_session)
        turkey = await _country(service)

        city = await service.create_city(
            CityCreate(country_id=turkey.id, name="Istanbul", local_tips="Carry an Istanbulkart")
        )

        assert city.country.code == "TR"
        assert city.attractions == []

    @pytest.mark.asyncio
    async def test_list_cities_for_country_sorted(self, db_session):
        service = GeoService(db_session)
        turkey = await _country(service)
        await service.create_city(CityCreate(country_id=turkey.id, name="Izmir"))
        await service.create_city(CityCreate(country_id=turkey.id, name="Ankara"))

        cities = await service.list_cities_for_country(turkey.id)

        assert [c.name for c in cities] == ["Ankara", "Izmir"]

    @pytest.mark.asyncio
    async def test_update_moves_city(self, db_session):
        service = GeoService(db_session)
        turkey = await _country(service)
        egypt = await _country(service, name="Egypt", code="EG")
        city = await service.create_city(CityCreate(country_id=turkey.id, name="Cairo"))

        updated = await service.update_city(city.id, CityUpdate(country_id=egypt.id))

        assert updated.country.code == "EG"

    @pytest.mark.asyncio
    async def test_generate_content_delegates(self, db_session):
        content = CityContent(description="City on two continents")
        with patch(
            "fairpass.backend.services.geo.ai.generate_city_content",
            AsyncMock(return_value=content),
        ) as generate:
            result = await GeoService(db_session).generate_city_content("Istanbul", "Turkey")

        assert result is content
        generate.assert_awaited_once_with("Istanbul", "Turkey")
