"""
Rider repository.

Data access layer for Rider.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.shared.repository import BaseRepository
from randonneurs.features.results.models import Result
from .models import Rider
from .schemas import RiderHistory


class RiderRepository(BaseRepository[Rider]):
    """Repository for Rider operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Rider)

    async def search_without_email(
        self,
        first_name_variants: list[str],
        limit: int = 100,
    ) -> list[RiderHistory]:
        """
        Historical riders (no email on file) whose first name contains any variant.

        Args:
            first_name_variants: Lowercase spellings, e.g. ["bob", "robert"]
            limit: Maximum riders to return

        Returns:
            Riders with first season and ride count from their results
        """
        if not first_name_variants:
            return []

        name_filter = or_(*[
            func.lower(Rider.first_name).contains(v) for v in first_name_variants
        ])
        result = await self.db.execute(
            select(
                Rider.id,
                Rider.first_name,
                Rider.last_name,
                func.min(Result.season).label("first_season"),
                func.count(Result.id).label("total_rides"),
            )
            .outerjoin(Result, Result.rider_id == Rider.id)
            .where(Rider.email.is_(None))
            .where(name_filter)
            .group_by(Rider.id, Rider.first_name, Rider.last_name)
            .order_by(Rider.last_name, Rider.first_name)
            .limit(limit)
        )
        return [RiderHistory.model_validate(row, from_attributes=True) for row in result.all()]
