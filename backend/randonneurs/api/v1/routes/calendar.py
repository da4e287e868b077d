"""
Calendar routes.

    /api/v1/calendar/toronto.ics

Subscribe from Google Calendar with webcal://<host>/api/v1/calendar/toronto.ics
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.db.session import get_async_db
from randonneurs.shared.errors import DomainError, NotFound
from randonneurs.features.calendar import CalendarFeedService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/{chapter}")
async def chapter_calendar(chapter: str, db: AsyncSession = Depends(get_async_db)):
    """iCalendar feed of a chapter's upcoming rides (".ics" suffix optional)."""
    slug = chapter[:-4] if chapter.endswith(".ics") else chapter

    try:
        content = await CalendarFeedService(db).chapter_feed(slug)
    except NotFound as e:
        return JSONResponse(status_code=404, content={"error": e.message})
    except (DomainError, SQLAlchemyError, ValueError) as e:
        logger.error(f"Failed to generate calendar for {slug}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to generate calendar"})

    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{slug}-calendar.ics"',
            "Cache-Control": "public, max-age=3600, stale-while-revalidate=86400",
        },
    )
