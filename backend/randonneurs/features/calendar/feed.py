"""
iCalendar feeds.

One feed per chapter with its upcoming scheduled rides. Start times are
club-local wall-clock times, converted to UTC in the feed; each entry lasts
the ride's overall time limit.
"""

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event as CalendarEvent, vCalAddress, vText
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.shared.errors import NotFound
from randonneurs.shared.formatters import format_event_type
from randonneurs.features.brevets import estimate_event_duration, event_start
from randonneurs.features.events.repository import ChapterRepository, EventRepository
from randonneurs.features.events.schemas import EventSummary

logger = logging.getLogger(__name__)

PRODUCT_ID = "-//Randonneurs Ontario//Calendar//EN"


def site_hostname(site_url: str) -> str:
    """'https://randonneursontario.ca/' -> 'randonneursontario.ca'"""
    return site_url.split("://", 1)[-1].rstrip("/")


def to_utc(local: datetime, tz_name: str) -> datetime:
    """Attach the club timezone to a naive wall-clock time and convert to UTC."""
    return local.replace(tzinfo=ZoneInfo(tz_name)).astimezone(timezone.utc)


def build_calendar_event(
    event: EventSummary,
    site_url: str,
    tz_name: str,
    organizer_name: str,
    dtstamp: datetime,
) -> CalendarEvent:
    host = site_hostname(site_url)
    type_label = format_event_type(event.event_type.value)
    duration = estimate_event_duration(event.distance_km, event.event_type)
    register_url = f"{site_url}/register/{event.slug}"

    description = "\n".join(part for part in (
        f"{event.distance_km}km {type_label}",
        event.description,
        f"Details & Registration: {register_url}",
    ) if part)

    entry = CalendarEvent()
    entry.add("uid", f"{event.id}@{host}")
    entry.add("dtstamp", dtstamp)
    entry.add("dtstart", to_utc(event_start(event.event_date, event.start_time), tz_name))
    entry.add("duration", duration.as_timedelta())
    entry.add("summary", f"{event.name} ({event.distance_km}km {type_label})")
    if event.start_location:
        entry.add("location", event.start_location)
    entry.add("description", description)
    entry.add("url", register_url)
    entry.add("categories", [type_label, "Cycling", "Randonneuring"])
    entry.add("status", "CONFIRMED")
    entry.add("transp", "OPAQUE")

    organizer = vCalAddress(f"mailto:info@{host}")
    organizer.params["cn"] = vText(organizer_name)
    entry["organizer"] = organizer
    return entry


def build_calendar(
    chapter_name: str,
    events: Iterable[EventSummary],
    site_url: Optional[str] = None,
    tz_name: Optional[str] = None,
) -> Calendar:
    """
    Calendar for a chapter's events.

    Args:
        chapter_name: Shown in the calendar name
        events: Events to include
        site_url: Public site URL for links and UIDs
        tz_name: Timezone event start times are expressed in
    """
    site_url = (site_url or settings.public_site_url).rstrip("/")
    tz_name = tz_name or settings.club_timezone
    calendar_name = f"{settings.club_name} - {chapter_name}"
    dtstamp = datetime.now(timezone.utc)

    calendar = Calendar()
    calendar.add("prodid", PRODUCT_ID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("x-wr-calname", calendar_name)

    for event in events:
        calendar.add_component(
            build_calendar_event(event, site_url, tz_name, calendar_name, dtstamp)
        )
    return calendar


class CalendarFeedService:
    def __init__(self, db: AsyncSession):
        self.chapters = ChapterRepository(db)
        self.events = EventRepository(db)

    async def chapter_feed(self, chapter_slug: str, today: Optional[date] = None) -> bytes:
        """
        Serialized iCalendar feed of a chapter's upcoming rides.

        Raises:
            NotFound: unknown chapter
        """
        chapter = await self.chapters.get_by_slug(chapter_slug)
        if chapter is None:
            raise NotFound("Chapter not found")

        today = today or datetime.now(ZoneInfo(settings.club_timezone)).date()
        events = await self.events.list_upcoming_for_chapter(chapter.id, today)

        calendar = build_calendar(chapter.name, events)
        logger.debug(f"Calendar feed for {chapter_slug}: {len(events)} event(s)")
        return calendar.to_ical()
