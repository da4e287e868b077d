"""
Events: chapters, routes, registrations and the event lifecycle.

Usage:
    from randonneurs.features.events import EventRepository, EventSummary
    from randonneurs.features.events.lifecycle import LifecycleService
"""

from .models import Chapter, Event, Registration, Route, RouteControl
from .repository import (
    ChapterRepository,
    EventRepository,
    RegistrationRepository,
    RouteRepository,
)
from .schemas import EventSummary, RegistrationContact

__all__ = [
    "Chapter",
    "Event",
    "Registration",
    "Route",
    "RouteControl",
    "ChapterRepository",
    "EventRepository",
    "RegistrationRepository",
    "RouteRepository",
    "EventSummary",
    "RegistrationContact",
]
