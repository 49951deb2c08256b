"""
Integration Tests for the University Portal.
"""

import pytest
from httpx import AsyncClient

from fairpass.backend.models.enums import EventStatus, ParticipationStatus

API = "/api/v1/portal"


class TestPortalEvents:
    @pytest.mark.asyncio
    async def test_my_events_and_explore(
        self, client: AsyncClient, api, make_event, make_university, university_headers
    ):
        joined = await make_event(title="Joined Fair")
        open_event = await make_event(title="Open Fair")
        await make_event(title="Draft Fair", status=EventStatus.DRAFT)
        university = await make_university(events={joined.id: ParticipationStatus.ACCEPTED})
        headers = university_headers(university)

        mine = api.assert_success(await client.get(f"{API}/events", headers=headers))["data"]
        explore = api.assert_success(await client.get(f"{API}/explore", headers=headers))["data"]

        assert [p["event"]["id"] for p in mine] == [joined.id]
        assert [e["id"] for e in explore] == [open_event.id]

    @pytest.mark.asyncio
    async def test_request_access(
        self, client: AsyncClient, api, make_event, make_university, university_headers
    ):
        event = await make_event()
        headers = university_headers(await make_university())

        response = await client.post(f"{API}/events/{event.id}/request", headers=headers)

        assert api.assert_success(response)["data"]["message"] == "Request sent successfully"
        mine = api.assert_success(await client.get(f"{API}/events", headers=headers))["data"]
        assert [p["status"] for p in mine] == ["REQUESTED"]

    @pytest.mark.asyncio
    async def test_accepted_university_cannot_request_again(
        self, client: AsyncClient, api, make_event, make_university, university_headers
    ):
        event = await make_event()
        university = await make_university(events={event.id: ParticipationStatus.ACCEPTED})

        response = await client.post(
            f"{API}/events/{event.id}/request", headers=university_headers(university)
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")


class TestLeadScanning:
    @pytest.mark.asyncio
    async def test_accepted_university_scans(
        self, client: AsyncClient, api, make_event, make_registration, make_university, university_headers
    ):
        event = await make_event()
        registration = await make_registration(event, full_name="Mae Jemison", interested_major=None)
        university = await make_university(events={event.id: ParticipationStatus.ACCEPTED})

        response = await client.post(
            f"{API}/scan", json={"qr_token": registration.qr_token}, headers=university_headers(university)
        )

        lead = api.assert_success(response)["data"]
        assert lead["name"] == "Mae Jemison"
        assert lead["academic_interest"] == "General"

    @pytest.mark.asyncio
    async def test_invited_university_cannot_scan(
        self, client: AsyncClient, api, make_event, make_registration, make_university, university_headers
    ):
        event = await make_event()
        registration = await make_registration(event)
        university = await make_university(events={event.id: ParticipationStatus.INVITED})

        response = await client.post(
            f"{API}/scan", json={"qr_token": registration.qr_token}, headers=university_headers(university)
        )

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, client: AsyncClient, api, make_university, university_headers):
        response = await client.post(
            f"{API}/scan", json={"qr_token": "nope"}, headers=university_headers(await make_university())
        )

        api.assert_error(response, 404)


class TestFavorites:
    @pytest.mark.asyncio
    async def test_add_update_list_delete(
        self, client: AsyncClient, api, make_event, make_registration, make_university, university_headers
    ):
        event = await make_event()
        registration = await make_registration(event, full_name="Vera Rubin")
        university = await make_university(events={event.id: ParticipationStatus.ACCEPTED})
        headers = university_headers(university)

        favorite = api.assert_success(
            await client.post(
                f"{API}/favorites",
                json={"event_id": event.id, "registration_id": registration.id, "rating": 4},
                headers=headers,
            ),
            201,
        )["data"]
        api.assert_success(
            await client.patch(
                f"{API}/favorites/{favorite['id']}", json={"note": "Astronomy"}, headers=headers
            )
        )
        listed = api.assert_success(
            await client.get(f"{API}/favorites?event_id={event.id}", headers=headers)
        )["data"]

        assert [(f["rating"], f["note"]) for f in listed] == [(4, "Astronomy")]

        deleted = await client.delete(f"{API}/favorites/{favorite['id']}", headers=headers)
        assert deleted.status_code == 204

    @pytest.mark.asyncio
    async def test_duplicate_favorite(
        self, client: AsyncClient, api, make_event, make_registration, make_university, university_headers
    ):
        event = await make_event()
        registration = await make_registration(event)
        headers = university_headers(
            await make_university(events={event.id: ParticipationStatus.ACCEPTED})
        )
        body = {"event_id": event.id, "registration_id": registration.id}

        await client.post(f"{API}/favorites", json=body, headers=headers)
        response = await client.post(f"{API}/favorites", json=body, headers=headers)

        api.assert_error(response, 409)

    @pytest.mark.asyncio
    async def test_list_requires_event(self, client: AsyncClient, api, make_university, university_headers):
        response = await client.get(f"{API}/favorites", headers=university_headers(await make_university()))

        api.assert_error(response, 400)


class TestStudentSearch:
    @pytest.mark.asyncio
    async def test_global_search_covers_university_events(
        self, client: AsyncClient, api, make_event, make_registration, make_university, university_headers
    ):
        accepted = await make_event()
        elsewhere = await make_event()
        await make_registration(accepted, full_name="Ada Yonath")
        await make_registration(elsewhere, full_name="Ada Palmer")
        university = await make_university(events={accepted.id: ParticipationStatus.ACCEPTED})

        response = await client.get(
            f"{API}/students/search?q=ada&global=true", headers=university_headers(university)
        )

        assert [s["full_name"] for s in api.assert_success(response)["data"]] == ["Ada Yonath"]

    @pytest.mark.asyncio
    async def test_short_query_returns_nothing(
        self, client: AsyncClient, api, make_event, make_university, university_headers
    ):
        event = await make_event()
        headers = university_headers(await make_university())

        response = await client.get(f"{API}/students/search?q=a&event_id={event.id}", headers=headers)

        assert api.assert_success(response)["data"] == []
