"""
Result collection.

When an event completes, every registered rider with an email gets a
`pending` result and an email with a personal link to report how the ride
went. Safe to run again: riders that already have a result are skipped and
only riders whose result was just created are emailed.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.shared.batch import map_with_partial_failure
from randonneurs.shared.constants import ResultStatus
from randonneurs.shared.email import EmailSender, get_email_sender
from randonneurs.shared.formatters import format_long_date
from randonneurs.features.events.repository import RegistrationRepository
from randonneurs.features.events.schemas import EventSummary
from .emails import SubmissionRequestData, build_result_submission_request_email
from .repository import ResultRepository
from .schemas import CollectionReport

logger = logging.getLogger(__name__)


@dataclass
class _CreatedResult:
    rider_name: str
    email: str
    submission_token: str


def submission_url(token: str, base_url: Optional[str] = None) -> str:
    return f"{(base_url or settings.base_url).rstrip('/')}/results/submit/{token}"


class ResultCollectionService:
    """Creates pending results for an event and requests submissions."""

    def __init__(
        self,
        db: AsyncSession,
        email_sender: Optional[EmailSender] = None,
        base_url: Optional[str] = None,
    ):
        self.db = db
        self.registrations = RegistrationRepository(db)
        self.results = ResultRepository(db)
        self.email_sender = email_sender or get_email_sender()
        self.base_url = base_url or settings.base_url

    async def collect(self, event: EventSummary) -> CollectionReport:
        """
        Create missing pending results and email their riders.

        Args:
            event: Completed event

        Returns:
            CollectionReport with counts and per-rider errors
        """
        report = CollectionReport()

        try:
            contacts = await self.registrations.list_registered_contacts(event.id)
            existing = await self.results.rider_ids_for_event(event.id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load registrations for event {event.id}: {e}")
            report.errors.append(f"Failed to fetch registrations: {e}")
            return report

        needing = [c for c in contacts if c.rider_id not in existing and c.email]

        created: list[_CreatedResult] = []
        for contact in needing:
            try:
                async with self.db.begin_nested():
                    result = await self.results.create(
                        event_id=event.id,
                        rider_id=contact.rider_id,
                        status=ResultStatus.PENDING.value,
                        season=event.season,
                        distance_km=event.distance_km,
                    )
            except SQLAlchemyError as e:
                report.errors.append(
                    f"Failed to create result for {contact.rider_name}: {e}"
                )
                continue
            created.append(
                _CreatedResult(contact.rider_name, contact.email, result.submission_token)
            )

        # Tokens must be durable before any link goes out
        await self.db.commit()
        report.results_created = len(created)

        event_date = format_long_date(event.event_date)
        chapter_name = event.chapter_name or settings.club_name

        async def send(item: _CreatedResult) -> bool:
            message = build_result_submission_request_email(
                SubmissionRequestData(
                    rider_name=item.rider_name,
                    event_name=event.name,
                    event_date=event_date,
                    event_distance=event.distance_km,
                    chapter_name=chapter_name,
                    submission_url=submission_url(item.submission_token, self.base_url),
                )
            )
            sent = await self.email_sender.send(item.email, message)
            if sent:
                logger.info(f"Sent result submission email to {item.email} for event {event.name}")
            return sent

        batch = await map_with_partial_failure(
            created, send, describe=lambda c: f"Failed to send email to {c.email}"
        )
        report.emails_sent = sum(1 for sent in batch.succeeded if sent)
        report.errors.extend(batch.error_messages)

        if report.errors:
            logger.warning(
                f"Collection for event {event.id}: {len(report.errors)} error(s)"
            )
        return report
