"""
Base Repository.

Base class for all repositories with common CRUD operations.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from fairpass.backend.core.exceptions import NotFoundError
from fairpass.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class and, optionally, the not-found message:

        class EventRepository(BaseRepository[Event]):
            model = Event
            not_found_message = "Event not found"
    """

    model: type[ModelType]
    not_found_message: str | None = None

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(self.not_found_message or f"{self.model.__name__} not found")
        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **kwargs: Any) -> ModelType:
        """
        Update an existing record. Unknown attribute names are ignored.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        return await self.apply(instance, **kwargs)

    async def apply(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Set attributes on a loaded instance and flush."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> None:
        """
        Delete a record by ID, cascading along ORM relationships.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: str) -> bool:
        """Check if a record exists by ID."""
        result = await self.session.execute(
            select(self.model.id).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none() is not None

    async def count(self, *criteria: Any) -> int:
        """Count records matching the given WHERE criteria."""
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(*criteria)
        )
        return result.scalar_one()

    async def _all(self, query: Select) -> list[Any]:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _first(self, query: Select) -> Any:
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()
