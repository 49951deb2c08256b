"""
Integration Tests for Venue Scanning.
"""

import pytest
from httpx import AsyncClient

from fairpass.backend.models.enums import AdminRole

API = "/api/v1/scanner"


class TestCheckIn:
    @pytest.mark.asyncio
    async def test_usher_checks_in_by_token(
        self, client: AsyncClient, api, admin_headers, make_event, make_registration
    ):
        event = await make_event()
        registration = await make_registration(event, full_name="Rosalind Franklin")
        headers = await admin_headers(AdminRole.USHER)

        response = await client.post(
            f"{API}/check-in",
            json={"event_id": event.id, "token": registration.qr_token},
            headers=headers,
        )

        result = api.assert_success(response)["data"]
        assert result["success"] is True
        assert result["registration"]["student_name"] == "Rosalind Franklin"
        assert result["registration"]["already_checked_in"] is False

        stats = api.assert_success(
            await client.get(f"{API}/events/{event.id}/stats", headers=headers)
        )["data"]
        assert stats["check_in_count"] == 1

    @pytest.mark.asyncio
    async def test_second_scan_reports_already_checked_in(
        self, client: AsyncClient, api, admin_headers, make_event, make_registration
    ):
        event = await make_event()
        registration = await make_registration(event)
        headers = await admin_headers(AdminRole.USHER)
        body = {"event_id": event.id, "token": registration.qr_token}

        first = api.assert_success(await client.post(f"{API}/check-in", json=body, headers=headers))
        second = api.assert_success(await client.post(f"{API}/check-in", json=body, headers=headers))

        assert second["data"]["message"] == "Already checked in"
        assert second["data"]["registration"]["already_checked_in"] is True
        assert (
            second["data"]["registration"]["checked_in_at"]
            == first["data"]["registration"]["checked_in_at"]
        )

    @pytest.mark.asyncio
    async def test_unknown_ticket_is_not_an_http_error(
        self, client: AsyncClient, api, admin_headers, make_event
    ):
        event = await make_event()

        response = await client.post(
            f"{API}/check-in",
            json={"event_id": event.id, "token": "no-such-ticket"},
            headers=await admin_headers(AdminRole.USHER),
        )

        result = api.assert_success(response)["data"]
        assert result == {"success": False, "message": "Registration not found", "registration": None}

    @pytest.mark.asyncio
    async def test_ticket_from_other_event(
        self, client: AsyncClient, api, admin_headers, make_event, make_registration
    ):
        registration = await make_registration(await make_event())
        other = await make_event()

        response = await client.post(
            f"{API}/check-in",
            json={"event_id": other.id, "token": registration.qr_token},
            headers=await admin_headers(AdminRole.USHER),
        )

        assert api.assert_success(response)["data"]["success"] is False

    @pytest.mark.asyncio
    async def test_manual_search(
        self, client: AsyncClient, api, admin_headers, make_event, make_registration
    ):
        event = await make_event()
        await make_registration(event, email="lise.meitner@example.com")

        response = await client.post(
            f"{API}/check-in",
            json={"event_id": event.id, "search": "lise.meitner"},
            headers=await admin_headers(AdminRole.USHER),
        )

        assert api.assert_success(response)["data"]["success"] is True

    @pytest.mark.asyncio
    async def test_requires_lookup_key(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event()

        response = await client.post(
            f"{API}/check-in",
            json={"event_id": event.id},
            headers=await admin_headers(AdminRole.USHER),
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")


class TestScannerEvents:
    @pytest.mark.asyncio
    async def test_lists_published_events(self, client: AsyncClient, api, admin_headers, make_event):
        event = await make_event()

        data = api.assert_success(
            await client.get(f"{API}/events", headers=await admin_headers(AdminRole.USHER))
        )["data"]

        assert [e["id"] for e in data] == [event.id]
