"""
Control card schemas.

A ControlCardSet is everything needed to print an event's cards: the
shared front (event, organizer, regulations, total time), the shared back
(controls in three columns) and one sheet per pair of riders.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from randonneurs.features.events.schemas import ControlInput


class OrganizerInfo(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""


class ControlCardRequest(BaseModel):
    """
    Admin input for generating cards.

    controls=None uses the route's stored controls, then the route-planning
    service; an explicit empty list means no controls.
    """

    organizer: OrganizerInfo = Field(default_factory=OrganizerInfo)
    controls: Optional[list[ControlInput]] = None
    extra_blank_cards: Optional[int] = Field(default=None, ge=0, le=50)


class ControlPoint(BaseModel):
    id: str
    name: str
    distance_km: float
    open_at: datetime
    close_at: datetime
    open_time: str   # "Sat 08h00"
    close_time: str


class CardRider(BaseModel):
    id: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CardEvent(BaseModel):
    id: str
    name: str
    route_name: str
    distance_km: int
    nominal_distance: int
    event_type: str
    event_date: date
    date_label: str  # "May 01 2026"
    start_time: str
    start_location: str = ""
    chapter: str


class TotalAllowableTime(BaseModel):
    hours: int
    minutes: int


class CardSheet(BaseModel):
    """One double-sided sheet holding two cards; None is a blank card."""

    left: Optional[CardRider] = None
    right: Optional[CardRider] = None


class ControlCardSet(BaseModel):
    event: CardEvent
    organizer: OrganizerInfo
    preamble: str
    emergency: str
    regulations: list[str]
    total_allowable_time: TotalAllowableTime
    controls: list[ControlPoint]
    control_columns: list[list[ControlPoint]]
    sheets: list[CardSheet]

    @property
    def card_count(self) -> int:
        return len(self.sheets) * 2
