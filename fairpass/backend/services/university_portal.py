"""
University Portal Service.

Operations for signed-in university representatives: their events,
discovering and requesting new ones, scanning student tickets at the
booth, favorites and student search.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from fairpass.backend.core.utils import utc_now
from fairpass.backend.integrations.email import get_email_client
from fairpass.backend.models.enums import ParticipationStatus
from fairpass.backend.models.event import Event
from fairpass.backend.models.registration import Registration
from fairpass.backend.models.university import EventParticipating, FavoriteStudent
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.registration import RegistrationRepository
from fairpass.backend.repositories.university import (
    FavoriteRepository,
    ParticipationRepository,
    UniversityRepository,
)
from fairpass.backend.schemas.base import MessageResponse
from fairpass.backend.schemas.university import (
    FavoriteCreate,
    FavoriteResponse,
    FavoriteStudentInfo,
    FavoriteUpdate,
    ScannedLead,
    StudentSearchResult,
)
from fairpass.backend.services.base import BaseService

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 20
FAVORITE_NOT_FOUND = "Favorite not found"


def favorite_response(favorite: FavoriteStudent) -> FavoriteResponse:
    registration = favorite.registration
    student = None
    if registration is not None:
        registrant = registration.registrant
        student = FavoriteStudentInfo(
            registration_id=registration.id,
            full_name=registrant.full_name,
            email=registrant.email,
            phone=registrant.phone,
            country=registrant.country,
            city=registrant.city,
            interested_major=registrant.interested_major,
            level_of_study=registrant.level_of_study,
            checked_in=registration.checked_in,
        )
    return FavoriteResponse(
        id=favorite.id,
        event_id=favorite.event_id,
        registration_id=favorite.registration_id,
        note=favorite.note,
        rating=favorite.rating,
        created_at=favorite.created_at,
        student=student,
    )


def search_result(registration: Registration, favorite: FavoriteStudent | None) -> StudentSearchResult:
    registrant = registration.registrant
    event = registration.event
    return StudentSearchResult(
        registration_id=registration.id,
        registrant_id=registrant.id,
        full_name=registrant.full_name,
        email=registrant.email,
        phone=registrant.phone,
        country=registrant.country,
        city=registrant.city,
        interested_major=registrant.interested_major,
        major_category=registrant.major_category,
        level_of_study=registrant.level_of_study,
        checked_in=registration.checked_in,
        event_id=event.id,
        event_title=event.title,
        event_slug=event.slug,
        is_favorite=favorite is not None,
        favorite_id=favorite.id if favorite else None,
        favorite_note=favorite.note if favorite else None,
        favorite_rating=favorite.rating if favorite else 0,
    )


class UniversityPortalService(BaseService):
    """Every operation is scoped to the calling university."""

    def __init__(self, session: AsyncSession, university_id: str) -> None:
        super().__init__(session)
        self.university_id = university_id
        self.universities = UniversityRepository(session)
        self.participations = ParticipationRepository(session)
        self.events = EventRepository(session)
        self.registrations = RegistrationRepository(session)
        self.favorites = FavoriteRepository(session)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def my_events(self) -> list[EventParticipating]:
        return await self.participations.list_for_university(self.university_id)

    async def explore_events(self) -> list[Event]:
        """Published upcoming events the university is not part of yet."""
        joined = set(await self.participations.event_ids_for_university(self.university_id))
        events = await self.events.list_upcoming_published(utc_now())
        return [event for event in events if event.id not in joined]

    async def request_event_access(self, event_id: str) -> MessageResponse:
        event = await self.events.get_by_id_or_none(event_id)
        if event is None:
            raise NotFoundError("Event not found")

        participation = await self.participations.get(event_id, self.university_id)
        if participation is not None and participation.status == ParticipationStatus.ACCEPTED:
            raise ValidationError("You are already participating in this event.")

        if participation is None:
            await self.participations.create(
                event_id=event_id,
                university_id=self.university_id,
                status=ParticipationStatus.REQUESTED,
            )
        else:
            await self.participations.apply(participation, status=ParticipationStatus.REQUESTED)

        university = await self.universities.get_by_id(self.university_id)
        self._log_operation("Participation requested", university_id=self.university_id, event_id=event_id)

        try:
            result = await get_email_client().send_access_request(
                university_name=university.name,
                event_id=event.id,
                event_title=event.title,
            )
            if not result.success:
                self._logger.warning("Access request email not sent", extra={"error": result.error})
        except Exception as e:
            self._logger.error("Access request email failed", extra={"error": str(e)})

        return MessageResponse(message="Request sent successfully")

    # -------------------------------------------------------------------------
    # Lead scanning
    # -------------------------------------------------------------------------

    async def scan_lead(self, qr_token: str) -> ScannedLead:
        """
        Read a student ticket at the booth.

        Raises:
            NotFoundError: Unknown ticket
            AuthorizationError: University is not accepted for the ticket's event
        """
        registration = await self.registrations.get_by_token(qr_token)
        if registration is None:
            raise NotFoundError("Invalid QR Code")

        participation = await self.participations.get(registration.event_id, self.university_id)
        if participation is None or participation.status != ParticipationStatus.ACCEPTED:
            raise AuthorizationError("You are not a participant of this event.")

        registrant = registration.registrant
        self._log_debug("Lead scanned", university_id=self.university_id, registration_id=registration.id)
        return ScannedLead(
            name=registrant.full_name,
            email=registrant.email,
            phone=registrant.phone,
            academic_interest=registrant.interested_major or "General",
        )

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    async def list_favorites(self, event_id: str | None) -> list[FavoriteResponse]:
        if not event_id:
            raise ValidationError("Event ID is required")
        favorites = await self.favorites.list_for_event(self.university_id, event_id)
        return [favorite_response(f) for f in favorites]

    async def add_favorite(self, data: FavoriteCreate) -> FavoriteResponse:
        registration = await self.registrations.get_by_id_or_none(data.registration_id)
        if registration is None or registration.event_id != data.event_id:
            raise NotFoundError("Registration not found for this event")

        if await self.favorites.get_existing(data.event_id, self.university_id, data.registration_id):
            raise ConflictError("Student already in favorites")

        favorite = await self._execute_db_operation(
            "add_favorite",
            self.favorites.create(
                event_id=data.event_id,
                university_id=self.university_id,
                registration_id=data.registration_id,
                note=data.note,
                rating=data.rating,
            ),
            conflict_message="Student already in favorites",
        )
        self._log_operation("Favorite added", university_id=self.university_id, favorite_id=favorite.id)
        return favorite_response(favorite)

    async def _get_favorite(self, favorite_id: str) -> FavoriteStudent:
        favorite = await self.favorites.get_owned(favorite_id, self.university_id)
        if favorite is None:
            raise NotFoundError(FAVORITE_NOT_FOUND)
        return favorite

    async def update_favorite(self, favorite_id: str, data: FavoriteUpdate) -> FavoriteResponse:
        favorite = await self._get_favorite(favorite_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("rating") is None:
            update_data.pop("rating", None)
        if update_data:
            favorite = await self.favorites.apply(favorite, **update_data)
        return favorite_response(favorite)

    async def delete_favorite(self, favorite_id: str) -> None:
        favorite = await self._get_favorite(favorite_id)
        await self.session.delete(favorite)
        await self.session.flush()
        self._log_operation("Favorite removed", university_id=self.university_id, favorite_id=favorite_id)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search_students(
        self,
        q: str | None,
        event_id: str | None = None,
        global_scope: bool = False,
    ) -> list[StudentSearchResult]:
        """
        Search registrations by name, email or phone.

        Global search covers every event the university is accepted or
        invited to; otherwise event_id picks the one event.
        """
        term = (q or "").strip()
        if len(term) < SEARCH_MIN_LENGTH:
            return []

        if global_scope:
            event_ids = await self.participations.event_ids_for_university(
                self.university_id,
                [ParticipationStatus.ACCEPTED, ParticipationStatus.INVITED],
            )
            if not event_ids:
                return []
        elif event_id:
            event_ids = [event_id]
        else:
            raise ValidationError("Event ID is required")

        registrations = await self.registrations.search_students(event_ids, term, SEARCH_LIMIT)
        favorites = await self.favorites.map_for_registrations(
            self.university_id, [r.id for r in registrations]
        )
        return [search_result(r, favorites.get(r.id)) for r in registrations]
