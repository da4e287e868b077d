"""iCalendar feeds of upcoming rides."""

from .feed import CalendarFeedService, build_calendar, build_calendar_event

__all__ = ["CalendarFeedService", "build_calendar", "build_calendar_event"]
