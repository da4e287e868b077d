"""
Control card generation.

Builds the printable layout for an event: every control's opening and
closing time from the ride's start, riders paired two to a sheet, and
blank cards for day-of registrations.
"""

import logging
import math
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.shared.errors import InvalidDistance, NotFound
from randonneurs.shared.formatters import format_card_date, format_control_time
from randonneurs.features.brevets import (
    compute_control_times,
    event_start,
    nominal_distance,
    total_allowable_time,
)
from randonneurs.features.events.repository import EventRepository, RegistrationRepository
from randonneurs.features.events.schemas import ControlInput
from . import text
from .rwgps import RWGPSClient, get_rwgps_client
from .schemas import (
    CardEvent,
    CardRider,
    CardSheet,
    ControlCardRequest,
    ControlCardSet,
    ControlPoint,
    OrganizerInfo,
    TotalAllowableTime,
)

logger = logging.getLogger(__name__)

CONTROL_COLUMNS = 3


def order_controls(controls: Iterable[ControlInput]) -> list[ControlInput]:
    """
    Sort controls by distance.

    Raises:
        InvalidDistance: negative distance, or two controls at the same distance
    """
    ordered = sorted(controls, key=lambda c: c.distance_km)
    for control in ordered:
        if control.distance_km < 0:
            raise InvalidDistance(f"Invalid control distance: {control.distance_km}")
    for previous, current in zip(ordered, ordered[1:]):
        if current.distance_km <= previous.distance_km:
            raise InvalidDistance(
                f"Controls '{previous.name}' and '{current.name}' are both at "
                f"{current.distance_km} km"
            )
    return ordered


def stamp_controls(
    controls: Sequence[ControlInput],
    start: datetime,
    route_km: float,
    event_type: str,
) -> list[ControlPoint]:
    points = []
    for index, control in enumerate(controls):
        times = compute_control_times(start, control.distance_km, route_km, event_type)
        points.append(ControlPoint(
            id=f"control-{index}",
            name=control.name,
            distance_km=control.distance_km,
            open_at=times.open_at,
            close_at=times.close_at,
            open_time=format_control_time(times.open_at),
            close_time=format_control_time(times.close_at),
        ))
    return points


def split_columns(points: Sequence[ControlPoint], columns: int = CONTROL_COLUMNS) -> list[list[ControlPoint]]:
    """Split into `columns` lists of ceil(n / columns), last ones possibly short or empty."""
    size = max(1, math.ceil(len(points) / columns))
    split = [list(points[i:i + size]) for i in range(0, len(points), size)]
    while len(split) < columns:
        split.append([])
    return split


def pair_riders(riders: Sequence[CardRider], extra_blank_cards: int = 0) -> list[CardSheet]:
    """
    Two cards per sheet, in order.

    An odd count leaves the last partner blank; no riders still gives one
    blank sheet.
    """
    slots: list[Optional[CardRider]] = list(riders) + [None] * extra_blank_cards
    if not slots:
        slots = [None, None]
    return [
        CardSheet(left=slots[i], right=slots[i + 1] if i + 1 < len(slots) else None)
        for i in range(0, len(slots), 2)
    ]


def build_control_card_set(
    event: CardEvent,
    organizer: OrganizerInfo,
    controls: Sequence[ControlInput],
    riders: Sequence[CardRider],
    start: datetime,
    extra_blank_cards: int = 0,
) -> ControlCardSet:
    """Assemble the card layout from already-loaded data. No I/O."""
    ordered = order_controls(controls)
    points = stamp_controls(ordered, start, event.distance_km, event.event_type)
    total = total_allowable_time(event.distance_km, event.event_type)

    return ControlCardSet(
        event=event,
        organizer=organizer,
        preamble=text.PREAMBLE,
        emergency=text.EMERGENCY,
        regulations=list(text.REGULATIONS),
        total_allowable_time=TotalAllowableTime(hours=total.hours, minutes=total.minutes),
        controls=points,
        control_columns=split_columns(points),
        sheets=pair_riders(riders, extra_blank_cards),
    )


class ControlCardGenerator:
    """Loads an event and produces its control cards."""

    def __init__(self, db: AsyncSession, rwgps_client: Optional[RWGPSClient] = None):
        self.events = EventRepository(db)
        self.registrations = RegistrationRepository(db)
        self.rwgps = rwgps_client or get_rwgps_client()

    async def _resolve_controls(self, event, request: ControlCardRequest) -> list[ControlInput]:
        if request.controls is not None:
            return list(request.controls)

        route = event.route
        if route is None:
            return []
        if route.controls:
            return [ControlInput(name=c.name, distance_km=c.distance_km) for c in route.controls]
        if route.rwgps_id:
            controls = await self.rwgps.fetch_controls(route.rwgps_id)
            logger.info(f"Imported {len(controls)} control(s) for route {route.slug} from RWGPS")
            return controls
        return []

    async def generate(self, event_id: str, request: ControlCardRequest) -> ControlCardSet:
        """
        Control cards for an event's registered riders.

        Raises:
            NotFound: unknown event
            InvalidDistance: invalid control list
        """
        event = await self.events.get_by_id(event_id)
        if event is None:
            raise NotFound("Event not found")

        controls = await self._resolve_controls(event, request)
        contacts = await self.registrations.list_registered_contacts(event.id)
        riders = [
            CardRider(id=c.rider_id, first_name=c.first_name, last_name=c.last_name)
            for c in contacts
        ]

        start_time = event.start_time or settings.default_start_time
        card_event = CardEvent(
            id=event.id,
            name=event.name,
            route_name=event.route.name if event.route else event.name,
            distance_km=event.distance_km,
            nominal_distance=nominal_distance(event.distance_km),
            event_type=event.event_type,
            event_date=event.event_date,
            date_label=format_card_date(event.event_date),
            start_time=start_time,
            start_location=event.start_location or "",
            chapter=event.chapter.name if event.chapter else settings.club_name,
        )

        extra = request.extra_blank_cards
        if extra is None:
            extra = settings.extra_blank_cards

        return build_control_card_set(
            event=card_event,
            organizer=request.organizer,
            controls=controls,
            riders=riders,
            start=event_start(event.event_date, start_time),
            extra_blank_cards=extra,
        )
