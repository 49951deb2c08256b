"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, handle transactions, and implement
business rules.

Usage:
    from fairpass.backend.services.base import BaseService

    class CountryService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = CountryRepository(session)

        async def create_country(self, data: CountryCreate) -> Country:
            if await self.repo.code_taken(data.code):
                raise ConflictError("Country code already exists")
            return await self.repo.create(**data.model_dump())
"""

from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import (
    ConflictError,
    DatabaseError,
    ValidationError,
)
from fairpass.backend.core.logging import get_logger

logger = get_logger(__name__)


def is_unique_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError comes from a unique constraint or index."""
    error_str = str(error).lower()
    return "unique" in error_str or "duplicate" in error_str


class BaseService:
    """
    Common base for FairPass services.

    A service owns the request session but never commits it; the request
    dependency, task or CLI command that opened the session does. Public
    registration is the one exception: it commits the ticket before any
    provider is contacted.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Any,
        conflict_message: str = "Resource already exists",
    ) -> Any:
        """
        Await a repository call inside a SAVEPOINT.

        A failed write rolls back only its own savepoint, so work done
        earlier in the request survives and the caller can still answer
        with a clean application error.

        Raises:
            ConflictError: For unique constraint violations, with conflict_message
            DatabaseError: For any other database error
        """
        try:
            async with self._session.begin_nested():
                return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            if is_unique_violation(e):
                raise ConflictError(conflict_message) from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _require(self, value: str | None, message: str) -> str:
        """Return the stripped value or raise ValidationError when blank."""
        if value is None or not value.strip():
            raise ValidationError(message)
        return value.strip()

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Info record tagged with the service class name."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
