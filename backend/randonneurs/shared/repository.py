"""
Base repository with common CRUD operations.

Feature repositories inherit from it and add their own typed queries.
All methods are async and only flush; committing is the caller's job.

Usage:
    class RiderRepository(BaseRepository[Rider]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Rider)
"""

from typing import TypeVar, Generic, Type

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Generic async repository over one SQLAlchemy model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _filtered(self, query, filters: dict):
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by_id(self, id: str | int) -> T | None:
        return await self.db.get(self.model, id)

    async def get_by(self, **filters) -> T | None:
        """Single entity matching all field filters, or None."""
        result = await self.db.execute(self._filtered(select(self.model), filters))
        return result.scalar_one_or_none()

    async def list_by(self, **filters) -> list[T]:
        """All entities matching all field filters."""
        result = await self.db.execute(self._filtered(select(self.model), filters))
        return list(result.scalars().all())

    async def create(self, **values) -> T:
        """Insert a new entity and return it with generated fields populated."""
        entity = self.model(**values)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **values) -> T:
        for key, value in values.items():
            setattr(entity, key, value)
        await self.db.flush()
        return entity

    async def delete(self, entity: T) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def count(self, **filters) -> int:
        query = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self.db.execute(query)
        return result.scalar() or 0
