"""
Event-related schemas.

Typed rows read from the store (joins are flattened here, never passed on
as raw ORM graphs) and API payloads.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from randonneurs.shared.constants import EventStatus, EventType


class EventSummary(BaseModel):
    """Event with its chapter name, as the lifecycle and workflows need it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    distance_km: int = Field(gt=0)
    event_type: EventType
    event_date: date
    start_time: Optional[str] = None
    start_location: Optional[str] = None
    description: Optional[str] = None
    status: EventStatus
    chapter_id: Optional[str] = None
    chapter_name: Optional[str] = None
    chapter_vp_email: Optional[str] = None
    route_id: Optional[str] = None

    @property
    def season(self) -> int:
        return self.event_date.year

    @classmethod
    def from_event(cls, event) -> "EventSummary":
        chapter = event.chapter
        return cls(
            id=event.id,
            slug=event.slug,
            name=event.name,
            distance_km=event.distance_km,
            event_type=event.event_type,
            event_date=event.event_date,
            start_time=event.start_time,
            start_location=event.start_location,
            description=event.description,
            status=event.status,
            chapter_id=event.chapter_id,
            chapter_name=chapter.name if chapter else None,
            chapter_vp_email=chapter.vp_email if chapter else None,
            route_id=event.route_id,
        )


class RegistrationContact(BaseModel):
    """Registered rider with contact details."""

    model_config = ConfigDict(from_attributes=True)

    registration_id: str
    rider_id: str
    first_name: str
    last_name: str
    email: Optional[str] = None

    @property
    def rider_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ControlInput(BaseModel):
    name: str = Field(min_length=1)
    distance_km: float = Field(ge=0)


class EventStatusUpdate(BaseModel):
    status: EventStatus


class CompletedEventSummary(BaseModel):
    id: str
    name: str
    results_created: int = Field(serialization_alias="resultsCreated")
    emails_sent: int = Field(serialization_alias="emailsSent")


class EventError(BaseModel):
    id: str
    name: str
    error: str
