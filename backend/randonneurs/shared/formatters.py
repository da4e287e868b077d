"""
Formatting utilities for display.

Used by control cards, emails and the calendar feed.
"""

from datetime import date, datetime

_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
_MONTH_NAMES_LONG = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

EVENT_TYPE_LABELS = {
    "brevet": "Brevet",
    "populaire": "Populaire",
    "fleche": "Flèche",
    "permanent": "Permanent",
}


def format_hm(minutes: int) -> str:
    """
    Format minutes as 'HH:MM'.

    810  → "13:30"
    6345 → "105:45"
    """
    h, m = divmod(int(minutes), 60)
    return f"{h:02d}:{m:02d}"


def format_control_time(when: datetime) -> str:
    """Control card time, e.g. 'Thu 04h30'."""
    return f"{_DAY_NAMES[when.weekday()]} {when.hour:02d}h{when.minute:02d}"


def format_card_date(when: date) -> str:
    """Control card date, e.g. 'Jan 08 2026'."""
    return f"{_MONTH_NAMES[when.month - 1]} {when.day:02d} {when.year}"


def format_long_date(when: date) -> str:
    """Email date, e.g. 'May 1, 2026'."""
    return f"{_MONTH_NAMES_LONG[when.month - 1]} {when.day}, {when.year}"


def format_event_type(event_type: str) -> str:
    return EVENT_TYPE_LABELS.get(event_type, event_type.capitalize())
