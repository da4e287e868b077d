"""
Result repository.

Data access layer for Result.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.shared.repository import BaseRepository
from randonneurs.features.events.models import Event
from randonneurs.features.riders.models import Rider
from .models import Result
from .schemas import ResultSummaryLine, SeasonResultRow


class ResultRepository(BaseRepository[Result]):
    """Repository for Result operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Result)

    async def get_by_token(self, token: str) -> Result | None:
        """Result for a submission token, with event, chapter and rider loaded."""
        if not token:
            return None
        return await self.get_by(submission_token=token)

    async def rider_ids_for_event(self, event_id: str) -> set[str]:
        """Riders that already have a result for the event."""
        result = await self.db.execute(
            select(Result.rider_id).where(Result.event_id == event_id)
        )
        return set(result.scalars().all())

    async def summary_lines_for_event(self, event_id: str) -> list[ResultSummaryLine]:
        """
        Results for the VP summary, finishers by time first.

        Args:
            event_id: Event ID

        Returns:
            One line per rider
        """
        result = await self.db.execute(
            select(
                Rider.first_name,
                Rider.last_name,
                Result.status,
                Result.finish_time,
                Result.rider_notes,
            )
            .join(Rider, Rider.id == Result.rider_id)
            .where(Result.event_id == event_id)
            .order_by(Result.finish_time.is_(None), Result.finish_time, Rider.last_name)
        )
        return [
            ResultSummaryLine(
                rider_name=f"{row.first_name} {row.last_name}",
                status=row.status,
                finish_time=row.finish_time,
                notes=row.rider_notes,
            )
            for row in result.all()
        ]

    async def list_for_season(self, season: int) -> list[SeasonResultRow]:
        """All results of a season, newest event first."""
        result = await self.db.execute(
            select(
                Result.id,
                Result.season,
                Result.status,
                Result.finish_time,
                Result.distance_km,
                Result.event_id,
                Event.name.label("event_name"),
                Event.event_date,
                Result.rider_id,
                Rider.first_name,
                Rider.last_name,
            )
            .join(Event, Event.id == Result.event_id)
            .join(Rider, Rider.id == Result.rider_id)
            .where(Result.season == season)
            .order_by(Event.event_date.desc(), Rider.last_name, Rider.first_name)
        )
        return [
            SeasonResultRow(
                id=row.id,
                season=row.season,
                status=row.status,
                finish_time=row.finish_time,
                distance_km=row.distance_km,
                event_id=row.event_id,
                event_name=row.event_name,
                event_date=row.event_date,
                rider_id=row.rider_id,
                rider_name=f"{row.first_name} {row.last_name}",
            )
            for row in result.all()
        ]

    async def delete_for_event(self, event_id: str) -> int:
        """Delete every result of an event, returning how many went."""
        result = await self.db.execute(
            delete(Result).where(Result.event_id == event_id)
        )
        await self.db.flush()
        return result.rowcount or 0
