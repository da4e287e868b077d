"""
Scheduled trigger routes.

Called by an external scheduler with `Authorization: Bearer <CRON_SECRET>`.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.db.session import get_async_db
from randonneurs.shared.errors import LifecycleCheckInProgress
from randonneurs.features.events.lifecycle import LifecycleService
from randonneurs.api.v1.dependencies import verify_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


@router.api_route(
    "/complete-events",
    methods=["GET", "POST"],
    dependencies=[Depends(verify_cron_secret)],
)
async def complete_events(db: AsyncSession = Depends(get_async_db)):
    """
    Complete scheduled events whose closing time has passed and start
    result collection for each.
    """
    service = LifecycleService(db)
    try:
        report = await service.run_periodic_check()
    except LifecycleCheckInProgress as e:
        raise HTTPException(status_code=409, detail=e.message)
    except SQLAlchemyError as e:
        logger.error(f"Error in complete-events cron: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    body = {
        "success": True,
        "checked": report.checked,
        "completed": report.completed,
        "completedEvents": [
            e.model_dump(by_alias=True) for e in report.completed_events
        ],
    }
    if report.errors:
        body["errors"] = [e.model_dump() for e in report.errors]
    return body
