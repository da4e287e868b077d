"""
Result-related schemas.

Request payloads, the rider-facing submission view and workflow reports.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from randonneurs.shared.constants import EventStatus, ResultStatus


class ResultSubmissionView(BaseModel):
    """What a rider sees behind their submission link."""

    id: str
    status: ResultStatus
    finish_time: Optional[str] = None
    gpx_url: Optional[str] = None
    gpx_file_path: Optional[str] = None
    control_card_front_path: Optional[str] = None
    control_card_back_path: Optional[str] = None
    rider_notes: Optional[str] = None
    submitted_at: Optional[datetime] = None

    event_id: str
    event_name: str
    event_date: date
    event_distance_km: int
    event_status: EventStatus
    chapter_name: Optional[str] = None

    rider_first_name: str
    rider_last_name: str

    can_submit: bool

    @property
    def rider_name(self) -> str:
        return f"{self.rider_first_name} {self.rider_last_name}"

    @classmethod
    def from_result(cls, result) -> "ResultSubmissionView":
        event = result.event
        event_status = EventStatus(event.status)
        return cls(
            id=result.id,
            status=result.status,
            finish_time=result.finish_time,
            gpx_url=result.gpx_url,
            gpx_file_path=result.gpx_file_path,
            control_card_front_path=result.control_card_front_path,
            control_card_back_path=result.control_card_back_path,
            rider_notes=result.rider_notes,
            submitted_at=result.submitted_at,
            event_id=event.id,
            event_name=event.name,
            event_date=event.event_date,
            event_distance_km=event.distance_km,
            event_status=event_status,
            chapter_name=event.chapter.name if event.chapter else None,
            rider_first_name=result.rider.first_name,
            rider_last_name=result.rider.last_name,
            can_submit=event_status is not EventStatus.SUBMITTED,
        )


class SubmitResultRequest(BaseModel):
    status: str
    finish_time: Optional[str] = Field(default=None, max_length=8)
    gpx_url: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=2000)


class UploadedFile(BaseModel):
    path: str
    url: str


class CollectionReport(BaseModel):
    """Outcome of creating pending results for one event."""

    results_created: int = 0
    emails_sent: int = 0
    errors: list[str] = Field(default_factory=list)


class SeasonResultRow(BaseModel):
    """Admin results listing row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    season: Optional[int] = None
    status: ResultStatus
    finish_time: Optional[str] = None
    event_id: str
    event_name: str
    event_date: date
    distance_km: Optional[int] = None
    rider_id: str
    rider_name: str


class ResultSummaryLine(BaseModel):
    """One line of the results summary sent to the chapter VP."""

    rider_name: str
    status: ResultStatus
    finish_time: Optional[str] = None
    notes: Optional[str] = None
