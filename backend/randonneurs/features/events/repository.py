"""
Event repositories.

Data access layer for Chapter, Event, Route and Registration models.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.shared.constants import EventStatus, EventType, RegistrationStatus
from randonneurs.shared.repository import BaseRepository
from randonneurs.features.riders.models import Rider
from .models import Chapter, Event, Registration, Route
from .schemas import EventSummary, RegistrationContact


class ChapterRepository(BaseRepository[Chapter]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Chapter)

    async def get_by_slug(self, slug: str) -> Chapter | None:
        return await self.get_by(slug=slug)


class EventRepository(BaseRepository[Event]):
    """Repository for Event operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Event)

    async def get_summary(self, event_id: str) -> EventSummary | None:
        event = await self.get_by_id(event_id)
        return EventSummary.from_event(event) if event else None

    async def list_by_status(self, status: EventStatus) -> list[Event]:
        """
        Events currently in `status`, oldest first.

        Rows are returned unconverted; callers build `EventSummary` per row
        so one malformed event does not hide the others.

        Args:
            status: Lifecycle status to filter on

        Returns:
            Event rows with chapter loaded
        """
        result = await self.db.execute(
            select(Event)
            .where(Event.status == status.value)
            .order_by(Event.event_date, Event.start_time)
        )
        return list(result.scalars().unique().all())

    async def list_upcoming_for_chapter(
        self, chapter_id: str, today: date
    ) -> list[EventSummary]:
        """Scheduled, non-permanent events from `today` on, by date."""
        result = await self.db.execute(
            select(Event)
            .where(Event.chapter_id == chapter_id)
            .where(Event.status == EventStatus.SCHEDULED.value)
            .where(Event.event_type != EventType.PERMANENT.value)
            .where(Event.event_date >= today)
            .order_by(Event.event_date, Event.start_time)
        )
        return [EventSummary.from_event(e) for e in result.scalars().unique().all()]

    async def set_status(self, event_id: str, status: EventStatus) -> None:
        event = await self.get_by_id(event_id)
        await self.update(event, status=status.value)


class RouteRepository(BaseRepository[Route]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Route)


class RegistrationRepository(BaseRepository[Registration]):
    """Repository for Registration operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Registration)

    async def list_registered_contacts(self, event_id: str) -> list[RegistrationContact]:
        """
        Riders registered (not cancelled) for an event, in registration order.

        Args:
            event_id: Event ID

        Returns:
            Registration + rider contact rows
        """
        result = await self.db.execute(
            select(
                Registration.id.label("registration_id"),
                Registration.rider_id,
                Rider.first_name,
                Rider.last_name,
                Rider.email,
            )
            .join(Rider, Rider.id == Registration.rider_id)
            .where(Registration.event_id == event_id)
            .where(Registration.status == RegistrationStatus.REGISTERED.value)
            .order_by(Registration.registered_at, Registration.id)
        )
        return [RegistrationContact.model_validate(row) for row in result.all()]
