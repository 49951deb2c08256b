"""
Unit Tests for UniversityService.
"""

import pytest
from sqlalchemy import select

from fairpass.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from fairpass.backend.core.security import verify_password
from fairpass.backend.models import UniversityUser
from fairpass.backend.models.enums import EventStatus, ParticipationStatus
from fairpass.backend.schemas.university import (
    ParticipationAssign,
    ParticipationUpdate,
    UniversityCreate,
    UniversityUpdate,
    UniversityUserUpsert,
)
from fairpass.backend.services.university import UniversityService


class TestUniversities:
    @pytest.mark.asyncio
    async def test_create_and_update(self, db_session):
        service = UniversityService(db_session)
        university = await service.create_university(UniversityCreate(name="Aegean Institute"))

        updated = await service.update_university(university.id, UniversityUpdate(city="Izmir"))

        assert updated.country == "Unknown"
        assert updated.city == "Izmir"

    @pytest.mark.asyncio
    async def test_list_counts_events_and_users(self, db_session, make_event, make_university):
        event = await make_event()
        await make_university(
            "Bosphorus University",
            user_email="rep@bosphorus.edu",
            events={event.id: ParticipationStatus.ACCEPTED},
        )
        await make_university("Aegean Institute")

        items = await UniversityService(db_session).list_universities()

        counts = {item.name: (item.event_count, item.user_count) for item in items}
        assert counts == {"Aegean Institute": (0, 0), "Bosphorus University": (1, 1)}

    @pytest.mark.asyncio
    async def test_get_missing(self, db_session):
        with pytest.raises(NotFoundError, match="University not found"):
            await UniversityService(db_session).get_university("missing")

    @pytest.mark.asyncio
    async def test_detail_includes_participations(self, db_session, make_event, make_university):
        event = await make_event()
        university = await make_university(events={event.id: ParticipationStatus.INVITED})

        detail = await UniversityService(db_session).get_university(university.id)

        assert [p.event_id for p in detail.participations] == [event.id]


class TestParticipation:
    @pytest.mark.asyncio
    async def test_assign_creates_invitation(self, db_session, make_event, make_university):
        event = await make_event()
        university = await make_university()

        participation = await UniversityService(db_session).assign_to_event(
            university.id, ParticipationAssign(event_id=event.id, booth_number="A12")
        )

        assert participation.status == ParticipationStatus.INVITED
        assert participation.booth_number == "A12"

    @pytest.mark.asyncio
    async def test_assign_twice_conflicts(self, db_session, make_event, make_university):
        event = await make_event()
        university = await make_university(events={event.id: ParticipationStatus.INVITED})

        with pytest.raises(ConflictError, match="already assigned"):
            await UniversityService(db_session).assign_to_event(
                university.id, ParticipationAssign(event_id=event.id)
            )

    @pytest.mark.asyncio
    async def test_update_status(self, db_session, make_event, make_university):
        event = await make_event()
        university = await make_university(events={event.id: ParticipationStatus.INVITED})

        participation = await UniversityService(db_session).update_participation(
            university.id, event.id, ParticipationUpdate(status=ParticipationStatus.ACCEPTED)
        )

        assert participation.status == ParticipationStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_remove_unassigned(self, db_session, make_event, make_university):
        event = await make_event()
        university = await make_university()

        with pytest.raises(NotFoundError, match="not assigned"):
            await UniversityService(db_session).remove_from_event(university.id, event.id)

    @pytest.mark.asyncio
    async def test_remove_all_returns_count(self, db_session, make_event, make_university):
        event = await make_event()
        await make_university("One", events={event.id: ParticipationStatus.INVITED})
        await make_university("Two", events={event.id: ParticipationStatus.ACCEPTED})

        removed = await UniversityService(db_session).remove_all_from_event(event.id)

        assert removed == 2

    @pytest.mark.asyncio
    async def test_available_events_exclude_assigned(self, db_session, make_event, make_university):
        """Should offer draft or published events the university is not on."""
        assigned = await make_event()
        draft = await make_event(status=EventStatus.DRAFT)
        await make_event(status=EventStatus.FINISHED)
        university = await make_university(events={assigned.id: ParticipationStatus.INVITED})

        events = await UniversityService(db_session).list_available_events(university.id)

        assert [e.id for e in events] == [draft.id]


class TestUniversityUser:
    @pytest.mark.asyncio
    async def test_new_user_requires_password(self, db_session, make_university):
        university = await make_university()

        with pytest.raises(ValidationError, match="Password is required"):
            await UniversityService(db_session).create_or_update_university_user(
                university.id, UniversityUserUpsert(email="rep@example.edu")
            )

    @pytest.mark.asyncio
    async def test_create_with_default_name(self, db_session, make_university):
        university = await make_university()

        user = await UniversityService(db_session).create_or_update_university_user(
            university.id, UniversityUserUpsert(email="rep@example.edu", password="s3cret!")
        )

        assert user.name == "University Representative"
        assert verify_password("s3cret!", user.password_hash)

    @pytest.mark.asyncio
    async def test_update_keeps_password(self, db_session, make_university, password):
        university = await make_university(user_email="rep@example.edu")

        user = await UniversityService(db_session).create_or_update_university_user(
            university.id, UniversityUserUpsert(email="new@example.edu", name="Dr. Rep")
        )

        assert user.email == "new@example.edu"
        assert user.name == "Dr. Rep"
        assert verify_password(password, user.password_hash)

    @pytest.mark.asyncio
    async def test_existing_email_moves_to_university(self, db_session, make_university):
        await make_university("Old University", user_email="rep@example.edu")
        target = await make_university("New University")

        await UniversityService(db_session).create_or_update_university_user(
            target.id, UniversityUserUpsert(email="rep@example.edu")
        )

        users = (await db_session.execute(select(UniversityUser))).scalars().all()
        assert [u.university_id for u in users] == [target.id]
