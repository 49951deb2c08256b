"""
University Service.

Admin-side management of universities: the directory itself, event
participation (invitations, requests and acceptance), the single portal
user per university, and AI drafted profile content.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from fairpass.backend.core.security import hash_password
from fairpass.backend.integrations import ai
from fairpass.backend.models.enums import ParticipationStatus
from fairpass.backend.models.event import Event
from fairpass.backend.models.university import EventParticipating, University, UniversityUser
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.university import (
    ParticipationRepository,
    UniversityRepository,
    UniversityUserRepository,
)
from fairpass.backend.schemas.university import (
    ParticipationAssign,
    ParticipationUpdate,
    UniversityCreate,
    UniversityDetail,
    UniversityListItem,
    UniversityResponse,
    UniversityUpdate,
    UniversityUserUpsert,
)
from fairpass.backend.services.base import BaseService

DEFAULT_USER_NAME = "University Representative"


class UniversityService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UniversityRepository(session)
        self.users = UniversityUserRepository(session)
        self.participations = ParticipationRepository(session)
        self.events = EventRepository(session)

    # -------------------------------------------------------------------------
    # Universities
    # -------------------------------------------------------------------------

    async def list_universities(self, active_only: bool = False) -> list[UniversityListItem]:
        rows = await self.repo.list_with_counts(active_only)
        return [
            UniversityListItem(
                **UniversityResponse.model_validate(university).model_dump(),
                event_count=event_count,
                user_count=user_count,
            )
            for university, event_count, user_count in rows
        ]

    async def get_university(self, university_id: str) -> UniversityDetail:
        """University with its participations (newest first) and users."""
        university = await self.repo.get_with_details(university_id)
        if university is None:
            raise NotFoundError("University not found")

        detail = UniversityDetail.model_validate(university)
        detail.participations.sort(key=lambda p: p.created_at, reverse=True)
        return detail

    async def create_university(self, data: UniversityCreate) -> University:
        self._log_operation("Creating university", name=data.name)
        return await self._execute_db_operation(
            "create_university",
            self.repo.create(**data.model_dump()),
        )

    async def update_university(self, university_id: str, data: UniversityUpdate) -> University:
        university = await self.repo.get_by_id(university_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return university

        self._log_operation("Updating university", university_id=university_id)
        return await self._execute_db_operation(
            "update_university",
            self.repo.apply(university, **update_data),
        )

    async def delete_university(self, university_id: str) -> None:
        self._log_operation("Deleting university", university_id=university_id)
        await self._execute_db_operation("delete_university", self.repo.delete(university_id))

    # -------------------------------------------------------------------------
    # Participation
    # -------------------------------------------------------------------------

    async def assign_to_event(self, university_id: str, data: ParticipationAssign) -> EventParticipating:
        """Invite a university to an event."""
        await self.repo.get_by_id(university_id)
        await self.events.get_by_id(data.event_id)
        if await self.participations.get(data.event_id, university_id) is not None:
            raise ConflictError("University is already assigned to this event")

        self._log_operation("Assigning university", university_id=university_id, event_id=data.event_id)
        return await self._execute_db_operation(
            "assign_university",
            self.participations.create(
                event_id=data.event_id,
                university_id=university_id,
                status=ParticipationStatus.INVITED,
                booth_number=data.booth_number,
                notes=data.notes,
            ),
            conflict_message="University is already assigned to this event",
        )

    async def _get_participation(self, university_id: str, event_id: str) -> EventParticipating:
        participation = await self.participations.get(event_id, university_id)
        if participation is None:
            raise NotFoundError("University is not assigned to this event")
        return participation

    async def update_participation(
        self,
        university_id: str,
        event_id: str,
        data: ParticipationUpdate,
    ) -> EventParticipating:
        participation = await self._get_participation(university_id, event_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return participation

        self._log_operation(
            "Updating participation",
            university_id=university_id,
            event_id=event_id,
            status=update_data.get("status"),
        )
        return await self.participations.apply(participation, **update_data)

    async def remove_from_event(self, university_id: str, event_id: str) -> None:
        participation = await self._get_participation(university_id, event_id)
        await self.session.delete(participation)
        await self.session.flush()
        self._log_operation("Removed university from event", university_id=university_id, event_id=event_id)

    async def remove_all_from_event(self, event_id: str) -> int:
        await self.events.get_by_id(event_id)
        removed = await self.participations.delete_all_for_event(event_id)
        self._log_operation("Removed all universities from event", event_id=event_id, removed=removed)
        return removed

    async def list_available_events(self, university_id: str) -> list[Event]:
        await self.repo.get_by_id(university_id)
        return await self.participations.list_events_available_for(university_id)

    # -------------------------------------------------------------------------
    # Portal user
    # -------------------------------------------------------------------------

    async def get_university_user(self, university_id: str) -> UniversityUser | None:
        await self.repo.get_by_id(university_id)
        return await self.users.get_for_university(university_id)

    async def create_or_update_university_user(
        self,
        university_id: str,
        data: UniversityUserUpsert,
    ) -> UniversityUser:
        """
        Set the university's portal login.

        The university's existing user is updated in place. Otherwise a
        user with the same email is moved to this university, or a new
        one is created, which requires a password.
        """
        await self.repo.get_by_id(university_id)

        values: dict = {"email": data.email}
        if data.name:
            values["name"] = data.name
        if data.password:
            values["password_hash"] = hash_password(data.password)

        user = await self.users.get_for_university(university_id)
        if user is None:
            user = await self.users.get_by_email(data.email)
            values["university_id"] = university_id

        if user is not None:
            self._log_operation("Updating university user", university_id=university_id)
            return await self._execute_db_operation(
                "update_university_user",
                self.users.apply(user, **values),
                conflict_message="Email already exists.",
            )

        if not data.password:
            raise ValidationError("Password is required for a new user")

        values.setdefault("name", DEFAULT_USER_NAME)
        self._log_operation("Creating university user", university_id=university_id)
        return await self._execute_db_operation(
            "create_university_user",
            self.users.create(**values),
            conflict_message="Email already exists.",
        )

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    async def generate_university_content(self, name: str) -> ai.UniversityContent:
        self._log_operation("Generating university content", name=name)
        return await ai.generate_university_content(name)
