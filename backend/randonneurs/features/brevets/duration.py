"""Whole-ride duration for calendar feeds."""

from datetime import date, datetime, time, timedelta

from randonneurs.config import settings
from randonneurs.shared.constants import EventType
from .time_limits import AllowableTime, close_hours, hours_to_allowable_time

# Calendar entries use the same limit as the lifecycle check
EventDuration = AllowableTime


def estimate_event_duration(
    distance_km, event_type: EventType | str = EventType.BREVET
) -> EventDuration:
    """
    Duration (hours + minutes) to block out in a calendar.

    Brevets use the BRM table, flèches 24 h, everything else the nominal
    fallback speed.
    """
    return hours_to_allowable_time(close_hours(distance_km, event_type))


def parse_start_time(start_time: str | None, default: str | None = None) -> time:
    """
    Parse 'HH:MM' (or 'HH:MM:SS'); None/empty falls back to the club default.

    Raises:
        ValueError: malformed time string
    """
    raw = (start_time or default or settings.default_start_time).strip()
    parts = raw.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid start time: {raw!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def event_start(
    event_date: date, start_time: str | None, default: str | None = None
) -> datetime:
    """Naive wall-clock start in the club timezone."""
    return datetime.combine(event_date, parse_start_time(start_time, default))


def event_end(
    event_date: date,
    start_time: str | None,
    distance_km,
    event_type: EventType | str = EventType.BREVET,
) -> datetime:
    """Start plus the ride's overall time limit."""
    return event_start(event_date, start_time) + timedelta(
        hours=close_hours(distance_km, event_type)
    )
