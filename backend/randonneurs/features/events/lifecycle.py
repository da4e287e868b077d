"""
Event lifecycle.

    scheduled -> completed -> submitted
    scheduled -> cancelled

A scheduled event completes automatically once its closing time
(start + overall time limit) has passed. Completing an event, automatically
or by an admin, starts result collection. The status change is committed
first: a failure while collecting never reverts it.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.shared.batch import map_with_partial_failure
from randonneurs.shared.constants import EventStatus
from randonneurs.shared.email import EmailSender, get_email_sender
from randonneurs.shared.errors import (
    InvalidEventData,
    InvalidTransition,
    LifecycleCheckInProgress,
    NotFound,
)
from randonneurs.features.brevets import close_hours, event_start
from randonneurs.features.results.collection import ResultCollectionService
from randonneurs.features.results.emails import build_acp_results_summary_email
from randonneurs.features.results.repository import ResultRepository
from randonneurs.features.results.schemas import CollectionReport
from .models import Event
from .repository import EventRepository
from .schemas import CompletedEventSummary, EventError, EventSummary

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.SCHEDULED: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset({EventStatus.SUBMITTED}),
}

# One periodic check at a time per process
_check_lock = asyncio.Lock()


def can_transition(current: EventStatus | str, target: EventStatus | str) -> bool:
    return EventStatus(target) in ALLOWED_TRANSITIONS.get(EventStatus(current), frozenset())


def ensure_transition(current: EventStatus | str, target: EventStatus | str) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Cannot change event status from {EventStatus(current).value} "
            f"to {EventStatus(target).value}"
        )


def closing_time(event: EventSummary) -> datetime:
    """Start (club default time when unset) plus the ride's overall limit."""
    start = event_start(event.event_date, event.start_time)
    return start + timedelta(hours=close_hours(event.distance_km, event.event_type))


def is_past_closing(event: EventSummary, now: datetime) -> bool:
    """Strictly after closing: at the closing minute the ride is still open."""
    return now > closing_time(event)


def summarize_scheduled(row: Event) -> EventSummary:
    """
    Typed summary of a stored event.

    Raises:
        InvalidEventData: the row fails validation (e.g. distance 0)
    """
    try:
        return EventSummary.from_event(row)
    except ValidationError as e:
        err = e.errors()[0]
        field_name = ".".join(str(p) for p in err["loc"]) or "event"
        raise InvalidEventData(f"Invalid {field_name}: {err['msg']}") from e


def club_now() -> datetime:
    """Current wall-clock time in the club timezone (naive)."""
    return datetime.now(ZoneInfo(settings.club_timezone)).replace(tzinfo=None)


@dataclass
class LifecycleCheckReport:
    checked: int = 0
    completed_events: list[CompletedEventSummary] = field(default_factory=list)
    errors: list[EventError] = field(default_factory=list)

    @property
    def completed(self) -> int:
        return len(self.completed_events)

    @property
    def error_messages(self) -> list[str]:
        return [f"{e.name}: {e.error}" for e in self.errors]


class LifecycleService:
    """Status transitions for events, automatic and admin-initiated."""

    def __init__(
        self,
        db: AsyncSession,
        collector: Optional[ResultCollectionService] = None,
        email_sender: Optional[EmailSender] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self.db = db
        self.events = EventRepository(db)
        self.results = ResultRepository(db)
        self.email_sender = email_sender or get_email_sender()
        self.collector = collector or ResultCollectionService(db, email_sender=self.email_sender)
        self.lock = lock or _check_lock

    async def _load(self, event_id: str) -> EventSummary:
        event = await self.events.get_summary(event_id)
        if event is None:
            raise NotFound("Event not found")
        return event

    async def _set_status(self, event: EventSummary, status: EventStatus) -> None:
        try:
            await self.events.set_status(event.id, status)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def _collect(self, event: EventSummary) -> CollectionReport:
        try:
            return await self.collector.collect(event)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Result collection failed for event {event.id}: {e}")
            return CollectionReport(errors=[f"Result collection failed: {e}"])

    async def run_periodic_check(self, now: Optional[datetime] = None) -> LifecycleCheckReport:
        """
        Complete every scheduled event whose closing time has passed.

        Args:
            now: Club-local wall-clock time (defaults to the current time)

        Returns:
            LifecycleCheckReport with per-event outcomes

        Raises:
            LifecycleCheckInProgress: another check is running
        """
        if self.lock.locked():
            raise LifecycleCheckInProgress()

        async with self.lock:
            now = now or club_now()
            rows = await self.events.list_by_status(EventStatus.SCHEDULED)
            report = LifecycleCheckReport(checked=len(rows))

            async def check(row: Event) -> Optional[EventSummary]:
                event = summarize_scheduled(row)
                try:
                    past = is_past_closing(event, now)
                except ValueError as e:
                    raise InvalidEventData(str(e)) from e
                return event if past else None

            checked = await map_with_partial_failure(
                rows, check, describe=lambda r: "Skipped event"
            )
            if not checked.ok:
                # Read before any rollback below expires the rows
                for failure in checked.failed:
                    logger.warning(f"Skipping event {failure.item.id}: {failure.error}")
                    report.errors.append(
                        EventError(id=failure.item.id, name=failure.item.name, error=failure.error)
                    )
            due = [e for e in checked.succeeded if e is not None]

            async def complete(event: EventSummary) -> tuple[EventSummary, CollectionReport]:
                await self._set_status(event, EventStatus.COMPLETED)
                logger.info(f"Auto-completed event: {event.name} ({event.id})")
                return event, await self._collect(event)

            batch = await map_with_partial_failure(
                due, complete, describe=lambda e: "Failed to complete event"
            )

            for event, collection in batch.succeeded:
                report.completed_events.append(
                    CompletedEventSummary(
                        id=event.id,
                        name=event.name,
                        results_created=collection.results_created,
                        emails_sent=collection.emails_sent,
                    )
                )
                report.errors.extend(
                    EventError(id=event.id, name=event.name, error=err)
                    for err in collection.errors
                )
            for failure in batch.failed:
                logger.error(f"Error completing event {failure.item.id}: {failure.error}")
                report.errors.append(
                    EventError(id=failure.item.id, name=failure.item.name, error=failure.error)
                )

        logger.info(
            f"Lifecycle check: {report.checked} checked, {report.completed} completed, "
            f"{len(report.errors)} error(s)"
        )
        return report

    async def complete_event(self, event_id: str) -> CollectionReport:
        """Manually complete a scheduled event and collect results."""
        event = await self._load(event_id)
        ensure_transition(event.status, EventStatus.COMPLETED)
        await self._set_status(event, EventStatus.COMPLETED)
        logger.info(f"Event {event.id} completed by admin")
        return await self._collect(event)

    async def cancel_event(self, event_id: str) -> int:
        """
        Cancel a scheduled event.

        Returns:
            Number of results removed with it
        """
        event = await self._load(event_id)
        ensure_transition(event.status, EventStatus.CANCELLED)
        try:
            removed = await self.results.delete_for_event(event.id)
            await self.events.set_status(event.id, EventStatus.CANCELLED)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        logger.info(f"Event {event.id} cancelled, {removed} result(s) removed")
        return removed

    async def submit_event_results(
        self, event_id: str, submitted_by: Optional[str] = None
    ) -> str:
        """
        Send the results summary to the chapter VP, then mark the event submitted.

        Returns:
            Address the summary went to

        Raises:
            NotFound, InvalidTransition
            EmailDeliveryError: the summary could not be sent; status unchanged
        """
        event = await self._load(event_id)
        if EventStatus(event.status) is EventStatus.SUBMITTED:
            raise InvalidTransition("Results have already been submitted")
        if EventStatus(event.status) is not EventStatus.COMPLETED:
            raise InvalidTransition("Only completed events can have results submitted")

        lines = await self.results.summary_lines_for_event(event.id)
        event_date = f"{event.event_date:%A, %B} {event.event_date.day}, {event.event_date.year}"
        message = build_acp_results_summary_email(
            event_name=event.name,
            event_date=event_date,
            chapter_name=event.chapter_name,
            lines=lines,
            submitted_by=submitted_by,
        )
        to = event.chapter_vp_email or settings.results_fallback_email

        await self.email_sender.send(to, message)
        await self._set_status(event, EventStatus.SUBMITTED)
        logger.info(f"Results for event {event.id} submitted to {to}")
        return to

    async def change_status(
        self, event_id: str, status: EventStatus
    ) -> Optional[CollectionReport]:
        """Admin status change; only completing an event yields a report."""
        if status is EventStatus.COMPLETED:
            return await self.complete_event(event_id)
        if status is EventStatus.CANCELLED:
            await self.cancel_event(event_id)
            return None
        if status is EventStatus.SUBMITTED:
            await self.submit_event_results(event_id)
            return None
        event = await self._load(event_id)
        ensure_transition(event.status, status)
        return None
