"""
Integration Tests for Event Management and Pagination.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from fairpass.backend.core.utils import utc_now
from fairpass.backend.models.enums import AdminRole, EventStatus, ParticipationStatus

API = "/api/v1/events"


def _payload(**overrides) -> dict:
    start = utc_now() + timedelta(days=30)
    values = {
        "title": "Ankara Education Fair",
        "slug": "ankara-fair",
        "country": "Turkey",
        "city": "Ankara",
        "venue_name": "Congresium",
        "venue_address": "Sögütözü Cd. 1, Ankara",
        "start_date_time": start.isoformat(),
        "end_date_time": (start + timedelta(hours=6)).isoformat(),
    }
    values.update(overrides)
    return values


class TestEventCrud:
    @pytest.mark.asyncio
    async def test_create_defaults_to_draft(self, client: AsyncClient, api, admin_headers):
        headers = await admin_headers(AdminRole.EVENT_MANAGER)

        data = api.assert_success(
            await client.post(API, json=_payload(), headers=headers), 201
        )["data"]

        assert data["status"] == EventStatus.DRAFT
        assert data["sessions"] == []

    @pytest.mark.asyncio
    async def test_duplicate_slug_conflicts(self, client: AsyncClient, api, admin_headers, make_event):
        await make_event(slug="ankara-fair")

        response = await client.post(API, json=_payload(), headers=await admin_headers())

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, client: AsyncClient, api, admin_headers):
        start = utc_now() + timedelta(days=30)

        response = await client.post(
            API,
            json=_payload(end_date_time=(start - timedelta(hours=1)).isoformat()),
            headers=await admin_headers(),
        )

        api.assert_validation_error(response)

    @pytest.mark.asyncio
    async def test_update_and_get(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event(slug="old-slug")
        headers = await admin_headers()

        api.assert_success(
            await client.put(
                f"{API}/{event.id}",
                json=_payload(slug="old-slug", title="Renamed Fair", capacity=500),
                headers=headers,
            )
        )
        data = api.assert_success(await client.get(f"{API}/{event.id}", headers=headers))["data"]

        assert (data["title"], data["capacity"]) == ("Renamed Fair", 500)

    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event()
        headers = await admin_headers()

        response = await client.delete(f"{API}/{event.id}", headers=headers)

        assert response.status_code == 204
        api.assert_error(await client.get(f"{API}/{event.id}", headers=headers), 404)

    @pytest.mark.asyncio
    async def test_staff_can_duplicate(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event(title="Spring Fair")

        response = await client.post(
            f"{API}/{event.id}/duplicate", headers=await admin_headers(AdminRole.EVENT_STAFF)
        )

        data = api.assert_success(response, 201)["data"]
        assert data["id"] != event.id
        assert data["status"] == EventStatus.DRAFT

    @pytest.mark.asyncio
    async def test_remove_all_universities(
        self, client: AsyncClient, api, admin_headers, make_event, make_university
    ):
        event = await make_event()
        await make_university("One", events={event.id: ParticipationStatus.INVITED})
        await make_university("Two", events={event.id: ParticipationStatus.ACCEPTED})

        response = await client.delete(f"{API}/{event.id}/universities", headers=await admin_headers())

        assert api.assert_success(response)["data"]["message"] == "Removed 2 universities"


class TestEventList:
    """Tests for the paginated event list."""

    @pytest.mark.asyncio
    async def test_returns_paginated_response_structure(
        self, client: AsyncClient, admin_headers, make_event
    ):
        await make_event()

        data = (await client.get(API, headers=await admin_headers())).json()

        assert data["success"] is True
        assert set(data["pagination"]) >= {"total", "limit", "offset", "has_more"}
        assert "metadata" in data

    @pytest.mark.asyncio
    async def test_respects_limit_and_offset(self, client: AsyncClient, admin_headers, make_event):
        for _ in range(5):
            await make_event()
        headers = await admin_headers()

        first = (await client.get(f"{API}?limit=2", headers=headers)).json()
        last = (await client.get(f"{API}?limit=2&offset=4", headers=headers)).json()

        assert len(first["data"]) == 2
        assert first["pagination"]["total"] == 5
        assert first["pagination"]["has_more"] is True
        assert len(last["data"]) == 1
        assert last["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_filters_by_status(self, client: AsyncClient, admin_headers, make_event):
        await make_event()
        draft = await make_event(status=EventStatus.DRAFT)

        data = (await client.get(f"{API}?status=DRAFT", headers=await admin_headers())).json()

        assert [e["id"] for e in data["data"]] == [draft.id]

    @pytest.mark.asyncio
    async def test_empty_results(self, client: AsyncClient, admin_headers):
        data = (await client.get(API, headers=await admin_headers())).json()

        assert data["data"] == []
        assert data["pagination"]["total"] == 0


class TestSessions:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event()
        headers = await admin_headers()
        start = event.start_date_time + timedelta(hours=1)

        created = api.assert_success(
            await client.post(
                f"{API}/{event.id}/sessions",
                json={
                    "title": "Scholarships 101",
                    "start_time": start.isoformat(),
                    "end_time": (start + timedelta(minutes=45)).isoformat(),
                },
                headers=headers,
            ),
            201,
        )["data"]
        listed = api.assert_success(
            await client.get(f"{API}/{event.id}/sessions", headers=headers)
        )["data"]

        assert [s["id"] for s in listed] == [created["id"]]

    @pytest.mark.asyncio
    async def test_null_start_time_is_rejected(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event()
        headers = await admin_headers()
        start = event.start_date_time
        created = api.assert_success(
            await client.post(
                f"{API}/{event.id}/sessions",
                json={
                    "title": "Visa Clinic",
                    "start_time": start.isoformat(),
                    "end_time": (start + timedelta(minutes=30)).isoformat(),
                },
                headers=headers,
            ),
            201,
        )["data"]

        response = await client.patch(
            f"{API}/{event.id}/sessions/{created['id']}",
            json={"start_time": None},
            headers=headers,
        )

        api.assert_validation_error(response, "body")
