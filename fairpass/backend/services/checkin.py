"""
Check-in Service.

Entry scanning at the venue. Check-in is idempotent: scanning a ticket a
second time reports the original check-in instead of failing.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import ValidationError
from fairpass.backend.models.enums import CheckInMethod
from fairpass.backend.models.registration import CheckIn, Registration
from fairpass.backend.repositories.registration import CheckInRepository, RegistrationRepository
from fairpass.backend.schemas.registration import CheckedInRegistration, CheckInResult, LiveStats
from fairpass.backend.services.base import BaseService, is_unique_violation


def _already_checked_in(registration: Registration, check_in: CheckIn) -> CheckInResult:
    return CheckInResult(
        success=True,
        message="Already checked in",
        registration=CheckedInRegistration(
            student_name=registration.registrant.full_name,
            email=registration.registrant.email,
            already_checked_in=True,
            checked_in_at=check_in.checked_in_at,
        ),
    )


class CheckInService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.registrations = RegistrationRepository(session)
        self.check_ins = CheckInRepository(session)

    async def check_in(
        self,
        event_id: str | None,
        token: str | None = None,
        search: str | None = None,
        operator_id: str | None = None,
    ) -> CheckInResult:
        """
        Check a registration in by QR token or by an email/phone fragment.

        Raises:
            ValidationError: If event_id or both lookup keys are missing
        """
        if not event_id:
            raise ValidationError("Event ID is required")
        if not token and not (search and search.strip()):
            raise ValidationError("Either QR token or search term is required")

        if token:
            registration = await self.registrations.get_by_token_in_event(event_id, token)
            method = CheckInMethod.QR
        else:
            registration = await self.registrations.search_in_event(event_id, search.strip())
            method = CheckInMethod.MANUAL

        if registration is None:
            self._log_debug("Check-in miss", event_id=event_id, method=method)
            return CheckInResult(success=False, message="Registration not found")

        if registration.check_in is not None:
            return _already_checked_in(registration, registration.check_in)

        try:
            async with self.session.begin_nested():
                check_in = await self.check_ins.create(
                    registration_id=registration.id,
                    checked_in_by_id=operator_id,
                    method=method,
                )
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            # Another scanner checked the same ticket in first
            existing = await self.check_ins.get_for_registration(registration.id)
            return _already_checked_in(registration, existing)

        self._log_operation(
            "Checked in",
            event_id=event_id,
            registration_id=registration.id,
            method=method,
        )
        return CheckInResult(
            success=True,
            message="Checked in successfully",
            registration=CheckedInRegistration(
                student_name=registration.registrant.full_name,
                email=registration.registrant.email,
                already_checked_in=False,
                checked_in_at=check_in.checked_in_at,
            ),
        )

    async def live_stats(self, event_id: str) -> LiveStats:
        return LiveStats(check_in_count=await self.registrations.count_checked_in(event_id))
